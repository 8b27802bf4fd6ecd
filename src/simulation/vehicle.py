"""
Kinematic fixed-wing vehicle.

Stands in for simulator telemetry: reads the actuator signals from the bus,
integrates a point-mass model and writes attitude, rates and GPS fixes back.
Not a flight-dynamics model; roll and pitch rates are simply proportional
to the control surface deflection and turns are coordinated.
"""

import math
from dataclasses import dataclass
from typing import Optional

import structlog

from components import FlightDataBus
from config import SimulationConfig
from navigation.geo import Waypoint, destination_point
from navigation.track import TrackEstimator

logger = structlog.get_logger()

GRAVITY = 9.80665  # m/s^2
MAX_ROLL_DEG = 60.0
MAX_PITCH_DEG = 30.0


@dataclass
class VehicleState:
    """Simulated vehicle state."""
    latitude: float
    longitude: float
    altitude: float = 500.0  # meters
    course: float = 0.0  # degrees true
    roll: float = 0.0  # degrees, positive = right wing down
    pitch: float = 0.0  # degrees, positive = nose up


class SimulatedVehicle:
    """
    Point-mass vehicle driven by the actuator outputs.

    Sign conventions match the stabilization loop: a positive aileron
    output rolls right, a positive elevator output pitches down.
    """

    def __init__(
        self,
        bus: FlightDataBus,
        config: Optional[SimulationConfig] = None,
        latitude: float = 47.2603,
        longitude: float = 7.4156,
        course: float = 0.0,
    ):
        """
        Initialize vehicle.

        Args:
            bus: Flight-data bus
            config: Simulation configuration
            latitude: Start latitude
            longitude: Start longitude
            course: Start course in degrees
        """
        self.bus = bus
        self.config = config or SimulationConfig()
        self.state = VehicleState(latitude=latitude, longitude=longitude, course=course % 360.0)
        self.track = TrackEstimator(bus)
        self.elapsed = 0.0

        self._publish(0.0, 0.0, 0.0, 0.0)
        # no previous fix yet to derive it from
        bus.course_over_ground.set_value(self.state.course)

        logger.info(
            "Simulated vehicle created",
            lat=latitude,
            lon=longitude,
            course=self.state.course,
            airspeed_kmh=self.config.airspeed_kmh,
        )

    @property
    def airspeed_ms(self) -> float:
        return self.config.airspeed_kmh / 3.6

    def update(self, time_elapsed: float) -> VehicleState:
        """
        Advance the model.

        Args:
            time_elapsed: Seconds to integrate

        Returns:
            Updated vehicle state
        """
        if time_elapsed <= 0:
            return self.state

        state = self.state
        aileron = max(-1.0, min(self.bus.aileron_output.get_value(), 1.0))
        elevator = max(-1.0, min(self.bus.elevator_output.get_value(), 1.0))

        roll_rate = self.config.roll_rate_deg_s * aileron
        pitch_rate = -self.config.pitch_rate_deg_s * elevator

        state.roll = max(-MAX_ROLL_DEG, min(state.roll + roll_rate * time_elapsed, MAX_ROLL_DEG))
        state.pitch = max(-MAX_PITCH_DEG, min(state.pitch + pitch_rate * time_elapsed, MAX_PITCH_DEG))

        speed = self.airspeed_ms
        yaw_rate = 0.0
        if speed > 0:
            yaw_rate = math.degrees(GRAVITY * math.tan(math.radians(state.roll)) / speed)
        state.course = (state.course + yaw_rate * time_elapsed) % 360.0

        ground_distance = speed * math.cos(math.radians(state.pitch)) * time_elapsed
        vertical_speed = speed * math.sin(math.radians(state.pitch))
        position = destination_point(Waypoint(state.latitude, state.longitude), state.course, ground_distance)
        state.latitude = position.latitude
        state.longitude = position.longitude
        state.altitude += vertical_speed * time_elapsed

        self.elapsed += time_elapsed
        self._publish(roll_rate, pitch_rate, yaw_rate, vertical_speed)
        return state

    def _publish(self, roll_rate: float, pitch_rate: float, yaw_rate: float, vertical_speed: float) -> None:
        state = self.state
        bus = self.bus

        bus.roll.set_value(state.roll)
        bus.pitch.set_value(state.pitch)
        bus.roll_rate.set_value(roll_rate)
        bus.pitch_rate.set_value(pitch_rate)
        bus.yaw_rate.set_value(yaw_rate)
        bus.airspeed.set_value(self.config.airspeed_kmh)
        bus.vertical_speed.set_value(vertical_speed)

        self.track.update(
            state.latitude,
            state.longitude,
            speed_kmh=self.config.airspeed_kmh * math.cos(math.radians(state.pitch)),
            altitude=state.altitude,
            satellites=self.config.satellites,
        )

    def get_status_dict(self) -> dict:
        """Get status as dictionary."""
        return {
            "lat": round(self.state.latitude, 6),
            "lon": round(self.state.longitude, 6),
            "alt": round(self.state.altitude, 1),
            "course": round(self.state.course, 1),
            "roll": round(self.state.roll, 1),
            "pitch": round(self.state.pitch, 1),
            "elapsed_s": round(self.elapsed, 1),
        }
