"""
Configuration management for the autopilot.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


@dataclass
class PIDGainConfig:
    """PID settings of one control axis."""
    p: float = 1.0
    i: float = 0.0
    d: float = 0.0
    i_min: float = -50.0
    i_max: float = 50.0


@dataclass
class GainsConfig:
    """Initial values for the live-tunable gain signals."""
    pitch: PIDGainConfig = field(default_factory=lambda: PIDGainConfig(p=1.0, i=0.02, d=0.5))
    roll: PIDGainConfig = field(default_factory=lambda: PIDGainConfig(p=1.0, i=0.02, d=0.5))
    course: PIDGainConfig = field(
        default_factory=lambda: PIDGainConfig(p=1.0, i=0.0, d=0.0, i_min=-100.0, i_max=100.0)
    )


@dataclass
class StabilizationConfig:
    """Attitude stabilization loop configuration."""
    update_rate_hz: float = 10.0
    correction_rate_deg_s: float = 30.0  # leveling rate of the default angle
    max_attitude_angle_deg: float = 60.0
    stick_deadband: float = 0.0  # stick input is +-1


@dataclass
class NavigationConfig:
    """Waypoint and holding navigation configuration."""
    update_rate_hz: float = 10.0
    target_radius_m: float = 200.0
    circling_radius_m: float = 300.0
    circling_direction: str = "clockwise"  # clockwise, anticlockwise
    max_roll_angle_deg: float = 40.0
    minimum_speed_kmh: float = 1.0  # below this the course is noise
    mission_completed_action: str = "circle_at_home"  # circle_at_home, restart_mission


@dataclass
class AttitudeHoldConfig:
    """Bandwidth-normalized attitude hold configuration."""
    enabled: bool = False
    update_rate_hz: float = 5.0
    max_deflection_deg: float = 60.0
    # negative gains: the hold works on inverted, normalized errors
    elevator: PIDGainConfig = field(
        default_factory=lambda: PIDGainConfig(p=-2.0, i=-0.3, d=-0.75, i_min=-1.0, i_max=1.0)
    )
    aileron: PIDGainConfig = field(
        default_factory=lambda: PIDGainConfig(p=-1.0, i=-0.05, d=-0.75, i_min=-1.0, i_max=1.0)
    )

    @classmethod
    def from_dict(cls, data: dict) -> "AttitudeHoldConfig":
        data = dict(data)
        for surface in ("elevator", "aileron"):
            if surface in data:
                data[surface] = PIDGainConfig(**data[surface])
        return cls(**data)


@dataclass
class SimulationConfig:
    """Kinematic vehicle used when no simulator telemetry is connected."""
    update_rate_hz: float = 20.0
    airspeed_kmh: float = 80.0
    roll_rate_deg_s: float = 60.0  # at full aileron
    pitch_rate_deg_s: float = 30.0  # at full elevator
    satellites: int = 8


@dataclass
class MissionConfig:
    """Mission definition."""
    home_lat: float = 47.2603  # Grenchen, Switzerland
    home_lon: float = 7.4156
    waypoints: List[List[float]] = field(default_factory=list)  # [[lat, lon], ...]


@dataclass
class AutopilotConfig:
    """Main configuration container."""
    stabilization: StabilizationConfig = field(default_factory=StabilizationConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    attitude_hold: AttitudeHoldConfig = field(default_factory=AttitudeHoldConfig)
    gains: GainsConfig = field(default_factory=GainsConfig)
    mission: MissionConfig = field(default_factory=MissionConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)

    status_interval_s: float = 5.0

    @classmethod
    def from_yaml(cls, path: Path) -> "AutopilotConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "stabilization" in data:
            config.stabilization = StabilizationConfig(**data["stabilization"])
        if "navigation" in data:
            config.navigation = NavigationConfig(**data["navigation"])
        if "attitude_hold" in data:
            config.attitude_hold = AttitudeHoldConfig.from_dict(data["attitude_hold"])
        if "gains" in data:
            gains = GainsConfig()
            for axis, values in data["gains"].items():
                if not hasattr(gains, axis):
                    raise ValueError(f"Unknown gain axis: {axis}")
                setattr(gains, axis, PIDGainConfig(**values))
            config.gains = gains
        if "mission" in data:
            config.mission = MissionConfig(**data["mission"])
        if "simulation" in data:
            config.simulation = SimulationConfig(**data["simulation"])

        if "status_interval_s" in data:
            config.status_interval_s = data["status_interval_s"]

        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)


def get_config(config_path: Optional[Path] = None) -> AutopilotConfig:
    """Get configuration, loading from file if provided."""
    if config_path and config_path.exists():
        return AutopilotConfig.from_yaml(config_path)
    return AutopilotConfig()
