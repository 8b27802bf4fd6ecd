"""
Flight-data bus.

A fixed registry of named signals acting as the wiring point between sensor
adapters, the control loops, actuators and UI. The bus is created once by the
composition root and handed to every component; components bind to signal
identity, never copy values out of it.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .signal import Signal, SignalGraph, snapshot

# name, low, high
BUS_SIGNALS: Tuple[Tuple[str, float, float], ...] = (
    # GPS receiver
    ("latitude", -90.0, 90.0),
    ("longitude", -180.0, 180.0),
    ("course_over_ground", 0.0, 360.0),
    ("speed_over_ground", 0.0, 500.0),  # km/h
    ("altitude", 0.0, 10000.0),  # meters MSL
    ("satellites", 0.0, 24.0),

    # Mission controller
    ("target_course", 0.0, 360.0),
    ("roll_preset", -90.0, 90.0),  # degrees, positive = right tilt
    ("pitch_preset", -90.0, 90.0),  # degrees, positive = backwards tilt
    ("current_waypoint", 0.0, 1000.0),  # 1-based, 0 = none

    # Stick controls
    ("aileron_input", -1.0, 1.0),
    ("elevator_input", -1.0, 1.0),

    # Motion controller / actuators
    ("aileron_output", -1.0, 1.0),
    ("elevator_output", -1.0, 1.0),
    ("roll_trim", -10.0, 10.0),
    ("pitch_trim", -10.0, 10.0),

    # Motion sensor
    ("pitch", -180.0, 180.0),
    ("roll", -180.0, 180.0),
    ("pitch_rate", -180.0, 180.0),
    ("roll_rate", -180.0, 180.0),
    ("yaw_rate", -180.0, 180.0),
    ("airspeed", 0.0, 500.0),  # km/h
    ("vertical_speed", -50.0, 50.0),  # m/s
)

GAIN_AXES = ("pitch", "roll", "course")
GAIN_TERMS = ("gain_p", "gain_i", "gain_d", "i_min", "i_max")


def gain_signal_name(axis: str, term: str) -> str:
    """Get the bus name of a PID gain signal (e.g. ``roll_gain_p``)."""
    return f"{axis}_{term}"


class FlightDataBus:
    """
    Named collection of every signal shared between autopilot components.

    Signals are reachable as attributes (``bus.roll``) or by name
    (``bus.signal("roll")``).
    """

    def __init__(self, graph: Optional[SignalGraph] = None):
        """
        Initialize bus.

        Args:
            graph: Graph to create the signals in (new graph if omitted)
        """
        self.graph = graph or SignalGraph()
        self._signals: Dict[str, Signal] = {}

        for name, low, high in BUS_SIGNALS:
            self._add(name, low, high)

        for axis in GAIN_AXES:
            for term in GAIN_TERMS:
                self._add(gain_signal_name(axis, term), -100.0, 100.0)

    def _add(self, name: str, low: float, high: float) -> None:
        signal = self.graph.create(low=low, high=high, name=name)
        self._signals[name] = signal
        setattr(self, name, signal)

    def __contains__(self, name: str) -> bool:
        return name in self._signals

    def __iter__(self) -> Iterator[str]:
        return iter(self._signals)

    def __len__(self) -> int:
        return len(self._signals)

    @property
    def names(self) -> List[str]:
        """Get all signal names in creation order."""
        return list(self._signals)

    def signal(self, name: str) -> Signal:
        """
        Get a signal by name.

        Raises:
            KeyError: If the bus has no signal with that name
        """
        try:
            return self._signals[name]
        except KeyError:
            raise KeyError(f"Unknown flight data signal: {name}") from None

    def gain(self, axis: str, term: str) -> Signal:
        """Get a PID gain signal, e.g. ``bus.gain("course", "gain_p")``."""
        return self.signal(gain_signal_name(axis, term))

    def snapshot(self, names: Optional[List[str]] = None, precision: Optional[int] = 3) -> Dict[str, float]:
        """
        Read current values of the bus.

        Args:
            names: Restrict to these signals (all if omitted)
            precision: Rounding for the returned values

        Returns:
            Mapping of signal names to values
        """
        selected = names if names is not None else self.names
        return snapshot({name: self.signal(name) for name in selected}, precision)
