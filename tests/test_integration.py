"""
Integration tests: autopilot loops closed over the simulated vehicle.
"""

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import AutopilotConfig
from flight.autopilot import Autopilot
from flight.modes import NavigationMode
from navigation.geo import distance_meters
from simulation import SimulatedVehicle

HOME = (47.2603, 7.4156)
WAYPOINTS = [[47.2700, 7.4156], [47.2700, 7.4350], [47.2550, 7.4350]]


def make_system(waypoints=None):
    """Create an autopilot and a vehicle starting at home heading north."""
    config = AutopilotConfig()
    config.mission.home_lat, config.mission.home_lon = HOME
    config.mission.waypoints = waypoints if waypoints is not None else []
    autopilot = Autopilot(config)
    vehicle = SimulatedVehicle(autopilot.bus, config.simulation, latitude=HOME[0], longitude=HOME[1])
    return autopilot, vehicle


def step(autopilot, vehicle, dt=0.1):
    vehicle.update(dt)
    autopilot.mission.update(dt)
    autopilot.stabilizer.update(dt)


class TestStabilizedFlight:
    """Tests for attitude stabilization in closed loop."""

    def test_levels_wings(self):
        """Test a banked vehicle is brought back level."""
        autopilot, vehicle = make_system()
        vehicle.state.roll = 30.0
        vehicle.state.pitch = 10.0
        autopilot.start_stabilizing()

        for _ in range(300):
            step(autopilot, vehicle)

        assert abs(vehicle.state.roll) < 3.0
        assert abs(vehicle.state.pitch) < 3.0

    def test_unstabilized_stick_banks(self):
        """Test that without stabilization the stick drives the surfaces."""
        autopilot, vehicle = make_system()
        autopilot.bus.aileron_input.set_value(0.5)

        for _ in range(10):
            step(autopilot, vehicle)

        assert vehicle.state.roll > 20.0

    def test_attitude_hold_levels(self):
        """Test the switched attitude hold levels the vehicle."""
        autopilot, vehicle = make_system()
        autopilot.toggle_attitude_hold()
        vehicle.state.roll = -20.0
        vehicle.state.pitch = 15.0

        for _ in range(150):
            vehicle.update(0.2)
            autopilot.attitude_hold.update(0.2)

        assert abs(vehicle.state.roll) < 2.0
        assert abs(vehicle.state.pitch) < 2.0


class TestMissionFlight:
    """Tests for flying a mission in closed loop."""

    def test_turns_toward_waypoint(self):
        """Test the vehicle turns onto the course to an eastern waypoint."""
        autopilot, vehicle = make_system(waypoints=[[HOME[0], 7.4800]])
        autopilot.start_stabilizing()
        autopilot.start_mission()

        for _ in range(400):
            step(autopilot, vehicle)

        course = autopilot.bus.course_over_ground.get_value()
        assert course == pytest.approx(autopilot.bus.target_course.get_value(), abs=5.0)
        assert 80.0 < course < 100.0

    def test_flies_mission_and_circles_home(self):
        """Test every waypoint is reached and the vehicle then holds at home."""
        autopilot, vehicle = make_system(waypoints=WAYPOINTS)
        autopilot.start_stabilizing()
        autopilot.start_mission()

        reached = set()
        completed_at = None
        for i in range(8000):
            step(autopilot, vehicle)
            reached.add(int(autopilot.bus.current_waypoint.get_value()))
            if completed_at is None and autopilot.mission.mode == NavigationMode.CIRCLE_HOME:
                completed_at = i

        assert {1, 2, 3} <= reached
        assert completed_at is not None
        assert autopilot.bus.current_waypoint.get_value() == 0

        distance = distance_meters(vehicle.state.latitude, vehicle.state.longitude, *HOME)
        assert distance < 1000.0

    def test_restart_mission_loops(self):
        """Test the restart policy flies the waypoints again."""
        autopilot, vehicle = make_system(waypoints=WAYPOINTS[:2])
        autopilot.mission.set_mission_completed_action("restart_mission")
        autopilot.start_stabilizing()
        autopilot.start_mission()

        sequence = []
        for _ in range(6000):
            step(autopilot, vehicle)
            waypoint = int(autopilot.bus.current_waypoint.get_value())
            if not sequence or sequence[-1] != waypoint:
                sequence.append(waypoint)

        assert autopilot.mission.mode == NavigationMode.NAVIGATE
        assert sequence[:4] == [1, 2, 1, 2]


class TestApplication:
    """Tests for the application entry point."""

    @pytest.mark.asyncio
    async def test_simulated_run(self):
        """Test a short simulated run starts and stops cleanly."""
        from main import UAVPilot

        config = AutopilotConfig()
        config.mission.waypoints = WAYPOINTS
        config.status_interval_s = 0.1
        app = UAVPilot(config, simulate=True)

        assert await app.start()
        await app.run(duration=0.3)

        assert app.vehicle is not None
        assert app.vehicle.elapsed > 0
        assert app.autopilot.mission.mode == NavigationMode.IDLE
        assert not any(task.is_running for task in app.autopilot.tasks.values())
