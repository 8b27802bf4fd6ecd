"""
Tests for great-circle navigation math.

pyproj's geodesic solver on a sphere serves as an independent reference.
"""

import dataclasses
import math
import sys
from pathlib import Path

import pytest
from pyproj import Geod

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from navigation.geo import (
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

SPHERE = Geod(a=EARTH_RADIUS_KM * 1000.0, b=EARTH_RADIUS_KM * 1000.0)
MEAN_SPHERE = Geod(a=EARTH_MEAN_RADIUS_M, b=EARTH_MEAN_RADIUS_M)

ROUTES = [
    (47.2603, 7.4156, 47.2700, 7.4350),
    (47.2603, 7.4156, 46.9480, 7.4474),
    (51.4700, -0.4543, 40.6413, -73.7781),
    (-33.8688, 151.2093, -36.8485, 174.7633),
    (0.0, 179.5, 0.5, -179.5),
]


class TestDistance:
    """Tests for distance calculations."""

    def test_one_degree_on_equator(self):
        """Test one degree of longitude on the equator."""
        expected = EARTH_RADIUS_KM * 1000.0 * math.pi / 180.0
        assert distance_meters(0.0, 0.0, 0.0, 1.0) == pytest.approx(expected)

    def test_identical_points(self):
        """Test the distance between identical points stays defined."""
        assert distance_meters(47.2603, 7.4156, 47.2603, 7.4156) == pytest.approx(0.0, abs=0.5)

    def test_antipodes(self):
        """Test the acos argument at the other end of its domain."""
        half_circumference = EARTH_RADIUS_KM * 1000.0 * math.pi
        assert distance_meters(0.0, 0.0, 0.0, 180.0) == pytest.approx(half_circumference)

    @pytest.mark.parametrize("lat1,lon1,lat2,lon2", ROUTES)
    def test_against_reference(self, lat1, lon1, lat2, lon2):
        """Test against the geodesic distance on the same sphere."""
        _, _, reference = SPHERE.inv(lon1, lat1, lon2, lat2)
        assert distance_meters(lat1, lon1, lat2, lon2) == pytest.approx(reference, rel=1e-6)

    @pytest.mark.parametrize("lat1,lon1,lat2,lon2", ROUTES)
    def test_haversine_agrees(self, lat1, lon1, lat2, lon2):
        """Test haversine and law of cosines share a radius."""
        assert distance_km(lat1, lon1, lat2, lon2) == pytest.approx(
            distance_meters(lat1, lon1, lat2, lon2) / 1000.0, rel=1e-6
        )


class TestCourse:
    """Tests for initial bearing."""

    @pytest.mark.parametrize("lat2,lon2,expected", [
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 90.0),
        (-1.0, 0.0, 180.0),
        (0.0, -1.0, 270.0),
    ])
    def test_cardinal_directions(self, lat2, lon2, expected):
        """Test bearings along meridian and equator."""
        assert course_degrees(0.0, 0.0, lat2, lon2) == pytest.approx(expected)

    def test_radians_range(self):
        """Test bearings in radians are in [0, 2*pi)."""
        west = course_radians(0.0, 0.0, 0.0, -1.0)
        assert west == pytest.approx(1.5 * math.pi)
        assert 0.0 <= west < 2 * math.pi

    @pytest.mark.parametrize("lat1,lon1,lat2,lon2", ROUTES)
    def test_against_reference(self, lat1, lon1, lat2, lon2):
        """Test against the geodesic forward azimuth."""
        azimuth, _, _ = SPHERE.inv(lon1, lat1, lon2, lat2)
        course = course_degrees(lat1, lon1, lat2, lon2)
        assert 0.0 <= course < 360.0
        assert course == pytest.approx(azimuth % 360.0, abs=1e-6)


class TestDestinationPoint:
    """Tests for the direct solution."""

    @pytest.mark.parametrize("bearing,distance", [
        (0.0, 1000.0),
        (45.0, 300.0),
        (135.0, 25000.0),
        (270.0, 5000.0),
    ])
    def test_against_reference(self, bearing, distance):
        """Test against the geodesic forward solution on the mean sphere."""
        start = Waypoint(47.2603, 7.4156)
        lon, lat, _ = MEAN_SPHERE.fwd(start.longitude, start.latitude, bearing, distance)

        dest = destination_point(start, bearing, distance)

        assert dest.latitude == pytest.approx(lat, abs=1e-7)
        assert dest.longitude == pytest.approx(lon, abs=1e-7)

    def test_uses_mean_radius(self):
        """Test the destination radius differs from the distance radius."""
        start = Waypoint(0.0, 0.0)
        dest = destination_point(start, 90.0, 1000.0)
        expected = math.degrees(1000.0 / EARTH_MEAN_RADIUS_M)
        assert dest.longitude == pytest.approx(expected)
        assert dest.latitude == pytest.approx(0.0, abs=1e-12)

    def test_longitude_normalized(self):
        """Test crossing the antimeridian wraps longitude."""
        dest = destination_point(Waypoint(0.0, 179.9), 90.0, 50000.0)
        assert -180.0 < dest.longitude <= 180.0
        assert dest.longitude < 0.0

    def test_zero_distance(self):
        """Test travelling no distance."""
        start = Waypoint(47.2603, 7.4156)
        dest = destination_point(start, 123.0, 0.0)
        assert dest.latitude == pytest.approx(start.latitude)
        assert dest.longitude == pytest.approx(start.longitude)


class TestWaypoint:
    """Tests for Waypoint."""

    def test_immutable(self):
        """Test waypoints cannot be changed once created."""
        waypoint = Waypoint(47.0, 8.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            waypoint.latitude = 46.0

    def test_value_equality(self):
        """Test waypoints compare by coordinates."""
        assert Waypoint(47.0, 8.0) == Waypoint(47.0, 8.0)


class TestCourseWrap:
    """Tests for course error wrapping."""

    def test_turn_left_across_north(self):
        """Test target 350 against course 10 turns left by 20."""
        assert wrap_course_error(350.0 - 10.0) == pytest.approx(-20.0)

    def test_turn_right_across_north(self):
        """Test target 10 against course 350 turns right by 20."""
        assert wrap_course_error(10.0 - 350.0) == pytest.approx(20.0)

    def test_in_range_unchanged(self):
        """Test errors within +-180 pass through."""
        assert wrap_course_error(90.0) == 90.0
        assert wrap_course_error(-180.0) == -180.0
        assert wrap_course_error(180.0) == 180.0
