"""
Waypoint and holding navigation loop.

Guides the vehicle through a mission defined by a home point and a list of
waypoints. Course errors are turned into a bank angle written to the roll
preset signal, which the stabilization loop holds.
"""

import math
from typing import List, Optional

import structlog

from components import FlightDataBus
from config import NavigationConfig
from flight.modes import (
    CirclingDirection,
    MissionCompletedAction,
    NavigationMode,
    mode_from_name,
)
from flight.pid import PIDGainSignals, PIDState, update_pid
from .geo import (
    Waypoint,
    course_degrees,
    course_radians,
    destination_point,
    distance_km,
    distance_meters,
    wrap_course_error,
)

logger = structlog.get_logger()

# look-ahead time of the holding pattern
CIRCLE_LOOK_AHEAD_S = 1.0


class MissionController:
    """
    Navigation state machine.

    States:
    - IDLE: target course follows the current course, no guidance
    - NAVIGATE: head for the current waypoint, advance inside the target radius
    - CIRCLE_HOME: fly a holding circle around home
    - RESTART_MISSION: transient, re-enters NAVIGATE at the first waypoint
    """

    def __init__(self, bus: FlightDataBus, config: Optional[NavigationConfig] = None):
        """
        Initialize mission controller.

        Args:
            bus: Flight-data bus
            config: Navigation configuration
        """
        self.bus = bus
        self.config = config or NavigationConfig()

        self._waypoints: List[Waypoint] = []
        self._index = 0
        self._home = Waypoint(0.0, 0.0)
        self._mode = NavigationMode.IDLE

        self.target_radius = self.config.target_radius_m
        self.circling_radius = self.config.circling_radius_m
        self.circling_direction = mode_from_name(CirclingDirection, self.config.circling_direction)
        self.maximum_roll_angle = self.config.max_roll_angle_deg
        self.minimum_speed = self.config.minimum_speed_kmh
        self.mission_completed_action = mode_from_name(
            MissionCompletedAction, self.config.mission_completed_action
        )

        self.gains = PIDGainSignals.from_bus(bus, "course")
        self.pid = PIDState()

    @property
    def mode(self) -> NavigationMode:
        """Get current navigation mode."""
        return self._mode

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._waypoints)

    @property
    def current_waypoint_index(self) -> int:
        return self._index

    @property
    def home(self) -> Waypoint:
        return self._home

    def add_waypoint(self, latitude: float, longitude: float) -> Waypoint:
        """
        Append a waypoint to the mission.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            The added waypoint
        """
        waypoint = Waypoint(latitude, longitude)
        self._waypoints.append(waypoint)
        logger.debug("Waypoint added", number=len(self._waypoints), lat=latitude, lon=longitude)
        return waypoint

    def set_home(self, latitude: float, longitude: float) -> None:
        """Set the point the vehicle returns to and circles around."""
        self._home = Waypoint(latitude, longitude)
        logger.info("Home set", lat=latitude, lon=longitude)

    def set_target_radius(self, radius: float) -> None:
        """
        Set the distance at which a waypoint counts as reached.

        0 means the waypoint must be hit, larger values turn for the next
        waypoint early.
        """
        self.target_radius = radius

    def set_circling_radius(self, radius: float) -> None:
        self.circling_radius = radius

    def set_circling_direction(self, direction) -> None:
        """
        Set the holding pattern direction.

        Args:
            direction: CirclingDirection, +1/-1 or a direction name
        """
        if isinstance(direction, str):
            direction = mode_from_name(CirclingDirection, direction)
        self.circling_direction = CirclingDirection(direction)

    def set_maximum_roll_angle(self, angle: float) -> None:
        self.maximum_roll_angle = angle

    def set_mission_completed_action(self, action) -> None:
        """
        Set what happens after the last waypoint.

        Args:
            action: MissionCompletedAction or its name
        """
        if isinstance(action, str):
            action = mode_from_name(MissionCompletedAction, action)
        self.mission_completed_action = action

    def set_navigation_mode(self, mode) -> None:
        """
        Force a navigation mode.

        Args:
            mode: NavigationMode or its name
        """
        if isinstance(mode, str):
            mode = mode_from_name(NavigationMode, mode)
        if mode != self._mode:
            logger.info("Navigation mode changed", old=self._mode.value, new=mode.value)
        self._mode = mode

    def start_mission(self) -> None:
        """Start the mission at the first waypoint."""
        self._index = 0
        self._mode = NavigationMode.NAVIGATE
        self.bus.current_waypoint.set_value(self._index + 1)
        logger.info("Mission started", waypoints=len(self._waypoints))

    def stop_mission(self) -> None:
        """Stop the mission and level the vehicle."""
        self._index = 0
        self.bus.pitch_preset.set_value(0.0)
        self.bus.roll_preset.set_value(0.0)
        self._mode = NavigationMode.IDLE
        self.bus.current_waypoint.set_value(0)
        logger.info("Mission stopped")

    def go_home(self) -> None:
        """Abandon the mission and circle around home."""
        self._index = 0
        self._mode = NavigationMode.CIRCLE_HOME
        self.bus.current_waypoint.set_value(0)
        logger.info("Returning home", lat=self._home.latitude, lon=self._home.longitude)

    def update(self, time_elapsed: float = 0.0) -> None:
        """
        Run one navigation and guidance cycle.

        Args:
            time_elapsed: Seconds since the previous cycle (unused, the
                holding look-ahead is time based on ground speed)
        """
        if self._mode == NavigationMode.IDLE:
            self.bus.target_course.set_value(self.bus.course_over_ground.get_value())
            return

        self._update_navigation()
        self._update_guidance()

    def _position(self):
        return self.bus.latitude.get_value(), self.bus.longitude.get_value()

    def _update_navigation(self) -> None:
        course = self.bus.course_over_ground.get_value()

        if self._mode == NavigationMode.RESTART_MISSION:
            self._restart()

        if self._mode == NavigationMode.NAVIGATE:
            if self._waypoints:
                course = self._navigate(course)
        elif self._mode == NavigationMode.CIRCLE_HOME:
            course = self._circle_home()

        self.bus.target_course.set_value(course)

    def _navigate(self, course: float) -> float:
        lat, lon = self._position()

        if self._index < len(self._waypoints):
            waypoint = self._waypoints[self._index]
            distance = distance_meters(lat, lon, waypoint.latitude, waypoint.longitude)
            if distance <= self.target_radius:
                self._index += 1
                logger.info("Waypoint reached", number=self._index, distance_m=round(distance, 1))

        if self._index < len(self._waypoints):
            waypoint = self._waypoints[self._index]
            course = course_degrees(lat, lon, waypoint.latitude, waypoint.longitude)
            self.bus.current_waypoint.set_value(self._index + 1)
            return course

        self._complete_mission()
        if self._mode == NavigationMode.RESTART_MISSION:
            self._restart()
            waypoint = self._waypoints[self._index]
            course = course_degrees(lat, lon, waypoint.latitude, waypoint.longitude)
        elif self._mode == NavigationMode.CIRCLE_HOME:
            course = self._circle_home()
        return course

    def _complete_mission(self) -> None:
        self._mode = self.mission_completed_action.navigation_mode
        logger.info("Mission completed", action=self.mission_completed_action.value)
        if self._mode == NavigationMode.CIRCLE_HOME:
            self.bus.current_waypoint.set_value(0)

    def _restart(self) -> None:
        self._index = 0
        self._mode = NavigationMode.NAVIGATE
        self.bus.current_waypoint.set_value(self._index + 1)
        logger.info("Mission restarted", waypoints=len(self._waypoints))

    def _circle_home(self) -> float:
        """Get the course toward a point one second ahead on the holding circle."""
        lat, lon = self._position()
        home = self._home

        if self.circling_radius <= 0:
            return course_degrees(lat, lon, home.latitude, home.longitude)

        # speed over ground is km/h and the radius meters; the look-ahead
        # angle is that raw ratio
        angular_velocity = self.bus.speed_over_ground.get_value() / self.circling_radius
        # bearing from home to the vehicle
        alpha = course_radians(lat, lon, home.latitude, home.longitude) + math.pi
        bearing = alpha + angular_velocity * CIRCLE_LOOK_AHEAD_S * int(self.circling_direction)

        target = destination_point(home, math.degrees(bearing), self.circling_radius)
        return course_degrees(lat, lon, target.latitude, target.longitude)

    def _update_guidance(self) -> None:
        # below the minimum speed the gps course is noise
        if self.bus.speed_over_ground.get_value() <= self.minimum_speed:
            return

        self.gains.apply(self.pid)

        course_error = wrap_course_error(
            self.bus.target_course.get_value() - self.bus.course_over_ground.get_value()
        )

        max_roll = self.maximum_roll_angle
        tilt_angle = max_roll * course_error / 180.0
        tilt_angle = update_pid(self.pid, tilt_angle)
        tilt_angle = max(tilt_angle, -max_roll)
        tilt_angle = min(tilt_angle, max_roll)

        self.bus.roll_preset.set_value(-tilt_angle)
        logger.debug(
            "Guidance updated",
            course_error=round(course_error, 1),
            roll_preset=round(-tilt_angle, 1),
        )

    def get_status_dict(self) -> dict:
        """Get status as dictionary."""
        lat, lon = self._position()
        return {
            "mode": self._mode.value,
            "waypoints": len(self._waypoints),
            "current_waypoint": int(self.bus.current_waypoint.get_value()),
            "target_course": round(self.bus.target_course.get_value(), 1),
            "roll_preset": round(self.bus.roll_preset.get_value(), 1),
            "home": {"lat": self._home.latitude, "lon": self._home.longitude},
            "home_distance_km": round(
                distance_km(lat, lon, self._home.latitude, self._home.longitude), 3
            ),
            "completed_action": self.mission_completed_action.value,
        }
