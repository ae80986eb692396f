"""
vehicle_ai — Decision-and-control core
======================================

Modules
-------
physics
    Vector helpers, braking distance, speed smoothing.
traffic_policy
    :class:`DrivingPolicy` and :class:`SignalTiming` tunable constants.
timers
    :class:`TimerManager` deterministic one-shot timers.
traffic_light
    :class:`TrafficLight` GO → CAUTION → STOP cycle.
path
    :class:`PolylinePath` reference path and lane-centre helpers.
perception
    Forward ray cast and alignment-cone classification.
decision
    Target-speed selection (panic, signal, peer, obstacle).
steering
    Look-ahead path following with a lateral lane offset.
lane_change
    :class:`LaneState` and the side-clearance probe.
panic
    :class:`PanicState` restartable panic timer.
controller
    :class:`VehicleController` per-vehicle tick.
vehicle
    :class:`Vehicle` kinematic body.
world
    :class:`World` entities, ray casts and the tick order.
sim_bridge
    :class:`SimBridge` background-thread orchestrator.
"""
