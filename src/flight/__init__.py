"""
Flight control module for the autopilot.

Provides the PID primitive, the attitude stabilization loop, the
bandwidth-normalized attitude hold and the fixed-rate task scheduler.
The composition root lives in ``flight.autopilot``.
"""

from .attitude_hold import AttitudeHold
from .modes import (
    CirclingDirection,
    MissionCompletedAction,
    NavigationMode,
    StabilizationMode,
)
from .pid import PIDGainSignals, PIDState, update_pid, update_pid_on_measurement
from .scheduler import PeriodicTask
from .stabilization import AttitudeStabilizer

__all__ = [
    "AttitudeHold",
    "AttitudeStabilizer",
    "CirclingDirection",
    "MissionCompletedAction",
    "NavigationMode",
    "PIDGainSignals",
    "PIDState",
    "PeriodicTask",
    "StabilizationMode",
    "update_pid",
    "update_pid_on_measurement",
]
