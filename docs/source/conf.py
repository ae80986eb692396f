# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

import os
import sys
import sphinx_rtd_dark_mode

# Project root on sys.path so autodoc can import vehicle_ai, bus and viewer
sys.path.insert(0, os.path.abspath("../.."))

project = 'Vehicle AI'
copyright = '2026, Vehicle AI contributors'
author = 'Vehicle AI contributors'
release = '0.1.0'

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",    # generate docs from docstrings
    "sphinx.ext.napoleon",   # parse Google/NumPy style docstrings
    "sphinx.ext.viewcode",   # add links to source code
    "sphinx_rtd_dark_mode"
]

templates_path = ['_templates']
exclude_patterns = []

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
default_dark_mode = True
html_static_path = ['_static']

# -- Mock imports: the viewer needs a display library the docs build does not --
autodoc_mock_imports = ["pygame"]
