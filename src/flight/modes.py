"""
Autopilot mode definitions.
"""

from enum import Enum, IntEnum
from typing import Type, TypeVar


class StabilizationMode(Enum):
    """Attitude stabilization loop modes."""
    IDLE = "idle"  # Stick passes straight through
    STABILIZING = "stabilizing"  # PID holds attitude while sticks are centered


class NavigationMode(Enum):
    """Navigation loop modes."""
    IDLE = "idle"
    NAVIGATE = "navigate"  # Following the waypoint list
    CIRCLE_HOME = "circle_home"  # Holding pattern around home
    RESTART_MISSION = "restart_mission"  # Transient, re-enters NAVIGATE


class MissionCompletedAction(Enum):
    """What the navigation loop does after the last waypoint."""
    CIRCLE_AT_HOME = "circle_at_home"
    RESTART_MISSION = "restart_mission"

    @property
    def navigation_mode(self) -> NavigationMode:
        """Navigation mode entered when the mission completes."""
        if self is MissionCompletedAction.RESTART_MISSION:
            return NavigationMode.RESTART_MISSION
        return NavigationMode.CIRCLE_HOME


class CirclingDirection(IntEnum):
    """Holding pattern direction, used as a sign."""
    CLOCKWISE = 1
    ANTICLOCKWISE = -1


_E = TypeVar("_E", bound=Enum)


def mode_from_name(enum_type: Type[_E], name: str) -> _E:
    """
    Get an enum member from its name or value string.

    Accepts ``"circle_at_home"``, ``"CIRCLE_AT_HOME"`` or
    ``"circle-at-home"`` alike.

    Raises:
        ValueError: If no member matches
    """
    key = name.strip().upper().replace("-", "_")
    for member in enum_type:
        if member.name == key or str(member.value).upper() == key:
            return member
    raise ValueError(f"Unknown {enum_type.__name__}: {name}")
