"""
uavpilot - Fixed-wing autopilot core

Attitude stabilization and waypoint navigation for a simulated fixed-wing
vehicle, built on reactive scalar signals shared through a flight-data bus.
"""

__version__ = "0.1.0"
__author__ = "uavpilot developers"
