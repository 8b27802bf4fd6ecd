"""
Simulation module for the autopilot.

Provides a kinematic vehicle that closes the loop between the actuator
outputs and the sensor signals when no simulator is connected.
"""

from .vehicle import SimulatedVehicle, VehicleState

__all__ = [
    "SimulatedVehicle",
    "VehicleState",
]
