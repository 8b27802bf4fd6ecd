"""
Course-over-ground estimation from consecutive position fixes.
"""

from typing import Optional, Tuple

import structlog

from components import FlightDataBus
from .geo import course_degrees

logger = structlog.get_logger()


class TrackEstimator:
    """
    Feeds GPS fixes into the flight-data bus.

    Receivers that only report position get their course over ground from
    the bearing between the previous and the current fix.
    """

    def __init__(self, bus: FlightDataBus):
        """
        Initialize estimator.

        Args:
            bus: Flight-data bus receiving the fixes
        """
        self.bus = bus
        self._last_fix: Optional[Tuple[float, float]] = None
        self.fix_count = 0

    @property
    def last_fix(self) -> Optional[Tuple[float, float]]:
        return self._last_fix

    def update(
        self,
        latitude: float,
        longitude: float,
        speed_kmh: Optional[float] = None,
        altitude: Optional[float] = None,
        satellites: Optional[int] = None,
    ) -> bool:
        """
        Process a position fix.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            speed_kmh: Ground speed in km/h, if the receiver reports it
            altitude: Altitude in meters, if reported
            satellites: Satellites in view, if reported

        Returns:
            True if the fix was accepted
        """
        # simulators report latitude 0 until they have a position
        if latitude == 0:
            logger.debug("Fix ignored", lat=latitude, lon=longitude)
            return False

        self.bus.latitude.set_value(latitude)
        self.bus.longitude.set_value(longitude)

        if self._last_fix is not None and self._last_fix != (latitude, longitude):
            last_lat, last_lon = self._last_fix
            self.bus.course_over_ground.set_value(
                course_degrees(last_lat, last_lon, latitude, longitude)
            )

        if speed_kmh is not None:
            self.bus.speed_over_ground.set_value(speed_kmh)
        if altitude is not None:
            self.bus.altitude.set_value(altitude)
        if satellites is not None:
            self.bus.satellites.set_value(satellites)

        self._last_fix = (latitude, longitude)
        self.fix_count += 1
        return True
