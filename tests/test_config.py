"""
Tests for configuration loading.
"""

import sys
from pathlib import Path

import pytest
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import AutopilotConfig, get_config

DEFAULT_CONFIG = Path(__file__).parent.parent / "config" / "default.yaml"


class TestAutopilotConfig:
    """Tests for AutopilotConfig."""

    def test_defaults(self):
        """Test the built-in defaults."""
        config = AutopilotConfig()
        assert config.stabilization.update_rate_hz == 10.0
        assert config.stabilization.correction_rate_deg_s == 30.0
        assert config.stabilization.max_attitude_angle_deg == 60.0
        assert config.navigation.target_radius_m == 200.0
        assert config.navigation.circling_radius_m == 300.0
        assert config.navigation.max_roll_angle_deg == 40.0
        assert config.navigation.minimum_speed_kmh == 1.0
        assert config.navigation.mission_completed_action == "circle_at_home"
        assert config.attitude_hold.update_rate_hz == 5.0
        assert config.attitude_hold.elevator.p == -2.0
        assert config.gains.course.i_max == 100.0
        assert config.mission.waypoints == []

    def test_missing_file_gives_defaults(self, tmp_path):
        """Test a missing file falls back to defaults."""
        config = get_config(tmp_path / "missing.yaml")
        assert config.navigation.target_radius_m == 200.0
        assert get_config().stabilization.update_rate_hz == 10.0

    def test_load_partial(self, tmp_path):
        """Test sections not in the file keep their defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "navigation": {"target_radius_m": 150.0, "circling_direction": "anticlockwise"},
            "gains": {"course": {"p": 2.0, "i": 0.1, "d": 0.0, "i_min": -10.0, "i_max": 10.0}},
            "attitude_hold": {"enabled": True, "aileron": {"p": -0.5}},
            "mission": {"home_lat": 46.9, "home_lon": 7.4, "waypoints": [[47.0, 7.5], [47.1, 7.6]]},
            "status_interval_s": 1.0,
        }))

        config = get_config(path)

        assert config.navigation.target_radius_m == 150.0
        assert config.navigation.circling_direction == "anticlockwise"
        assert config.navigation.circling_radius_m == 300.0
        assert config.gains.course.p == 2.0
        assert config.gains.roll.d == 0.5
        assert config.attitude_hold.enabled
        assert config.attitude_hold.aileron.p == -0.5
        assert config.attitude_hold.elevator.p == -2.0
        assert config.mission.waypoints == [[47.0, 7.5], [47.1, 7.6]]
        assert config.status_interval_s == 1.0
        assert config.stabilization.update_rate_hz == 10.0

    def test_unknown_gain_axis(self, tmp_path):
        """Test gains for an unknown axis are rejected."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"gains": {"yaw": {"p": 1.0}}}))
        with pytest.raises(ValueError):
            get_config(path)

    def test_round_trip(self, tmp_path):
        """Test a saved configuration loads back unchanged."""
        config = AutopilotConfig()
        config.navigation.mission_completed_action = "restart_mission"
        config.mission.waypoints = [[47.0, 7.5]]
        path = tmp_path / "saved.yaml"

        config.to_yaml(path)

        assert get_config(path) == config

    def test_shipped_default_file(self):
        """Test the shipped configuration loads."""
        config = get_config(DEFAULT_CONFIG)
        assert len(config.mission.waypoints) == 3
        assert config.navigation.circling_direction == "clockwise"
        assert config.attitude_hold.aileron.d == -0.75
