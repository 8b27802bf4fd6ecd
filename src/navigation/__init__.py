"""
Navigation module for the autopilot.

Provides great-circle math, the waypoint/holding mission controller and
course estimation from GPS fixes.
"""

from .geo import (
    EARTH_MEAN_RADIUS_M,
    EARTH_RADIUS_KM,
    Waypoint,
    course_degrees,
    course_radians,
    destination_point,
    distance_km,
    distance_meters,
    wrap_course_error,
)
from .mission import MissionController
from .track import TrackEstimator

__all__ = [
    "EARTH_MEAN_RADIUS_M",
    "EARTH_RADIUS_KM",
    "MissionController",
    "TrackEstimator",
    "Waypoint",
    "course_degrees",
    "course_radians",
    "destination_point",
    "distance_km",
    "distance_meters",
    "wrap_course_error",
]
