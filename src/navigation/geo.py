"""
Great-circle navigation math.

Pure functions on a spherical earth. Distance and course use the 6371 km
mean radius; destination point uses the 6372797.560856 m radius of the
direct solution it is paired with. The two radii are kept separate.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0
EARTH_MEAN_RADIUS_M = 6372797.560856


@dataclass(frozen=True)
class Waypoint:
    """Geographic point, immutable once created."""
    latitude: float  # degrees
    longitude: float  # decimal degrees


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Get the great-circle distance between two points.

    Uses the spherical law of cosines.

    Args:
        lat1: Start latitude (degrees)
        lon1: Start longitude (degrees)
        lat2: End latitude (degrees)
        lon2: End longitude (degrees)

    Returns:
        Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    cos_angle = math.sin(phi1) * math.sin(phi2) + math.cos(phi1) * math.cos(phi2) * math.cos(dlon)
    # rounding can push identical points just past 1
    cos_angle = max(-1.0, min(cos_angle, 1.0))

    return math.acos(cos_angle) * EARTH_RADIUS_KM * 1000.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Get the great-circle distance between two points using haversine.

    Returns:
        Distance in kilometers
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = phi2 - phi1
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def course_radians(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Get the initial bearing from the first point to the second.

    Returns:
        Bearing in radians, 0 = north, clockwise, in [0, 2*pi)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    y = math.sin(dlon) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlon)
    return math.atan2(y, x) % (2 * math.pi)


def course_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Get the initial bearing from the first point to the second.

    Returns:
        Bearing in degrees, 0 = north, clockwise, in [0, 360)
    """
    return math.degrees(course_radians(lat1, lon1, lat2, lon2)) % 360.0


def destination_point(start: Waypoint, bearing_deg: float, distance_m: float) -> Waypoint:
    """
    Get the point reached from start along a bearing.

    Args:
        start: Start point
        bearing_deg: Initial bearing in degrees
        distance_m: Distance to travel in meters

    Returns:
        Destination, longitude normalized to (-180, 180]
    """
    lat1 = math.radians(start.latitude)
    lon1 = math.radians(start.longitude)
    bearing = math.radians(bearing_deg)
    angular_distance = distance_m / EARTH_MEAN_RADIUS_M

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular_distance)
        + math.cos(lat1) * math.sin(angular_distance) * math.cos(bearing)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(angular_distance) * math.cos(lat1),
        math.cos(angular_distance) - math.sin(lat1) * math.sin(lat2),
    )
    lon2 = math.pi - ((math.pi - lon2) % (2 * math.pi))

    return Waypoint(latitude=math.degrees(lat2), longitude=math.degrees(lon2))


def wrap_course_error(error_deg: float) -> float:
    """
    Wrap a course difference into [-180, 180].

    A target of 350 against a course of 10 is a 20 degree turn left (-20),
    not a 340 degree turn right.
    """
    while error_deg > 180.0:
        error_deg -= 360.0
    while error_deg < -180.0:
        error_deg += 360.0
    return error_deg
