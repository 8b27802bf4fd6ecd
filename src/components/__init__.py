"""
Signal components for the autopilot.

Provides the scalar signal primitive, the flight-data bus that names the
shared signals, and signal routing helpers.
"""

from .bus import FlightDataBus
from .signal import Signal, SignalGraph
from .switch import TwoWaySwitch

__all__ = [
    "FlightDataBus",
    "Signal",
    "SignalGraph",
    "TwoWaySwitch",
]
