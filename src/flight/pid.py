"""
PID controller primitive.

The proportional term reacts to the current error, the integral term to the
sum of recent errors (clamped against windup) and the derivative term to the
rate at which the error changes.
"""

from dataclasses import dataclass

from components import Signal


@dataclass
class PIDState:
    """PID gains and the state carried between updates."""
    p_gain: float = 0.0
    i_gain: float = 0.0
    d_gain: float = 0.0
    i_min: float = 0.0  # minimum allowable integral state
    i_max: float = 0.0  # maximum allowable integral state
    i_state: float = 0.0  # integral state
    d_state: float = 0.0  # last derivative input


def _accumulate(pid: PIDState, error: float) -> None:
    # clamped after accumulation, so one large error saturates at once
    pid.i_state += error
    if pid.i_state > pid.i_max:
        pid.i_state = pid.i_max
    elif pid.i_state < pid.i_min:
        pid.i_state = pid.i_min


def update_pid(pid: PIDState, error: float) -> float:
    """
    Update the PID controller with the current error.

    Args:
        pid: Gains and state, updated in place
        error: Difference between current and target value

    Returns:
        Proposed correction
    """
    _accumulate(pid, error)

    p_value = pid.p_gain * error
    i_value = pid.i_gain * pid.i_state

    d_value = pid.d_gain * (error - pid.d_state)
    pid.d_state = error

    return p_value + i_value + d_value


def update_pid_on_measurement(pid: PIDState, error: float, position: float) -> float:
    """
    Update the PID controller with the derivative taken on the position.

    The derivative term is subtracted, damping changes of the measured
    position rather than of the error.

    Args:
        pid: Gains and state, updated in place
        error: Difference between target and current position
        position: Current position

    Returns:
        Proposed command
    """
    p_term = pid.p_gain * error
    _accumulate(pid, error)
    i_term = pid.i_gain * pid.i_state

    d_term = pid.d_gain * (position - pid.d_state)
    pid.d_state = position

    return p_term + i_term - d_term


class PIDGainSignals:
    """The five externally adjustable settings of one PID axis."""

    def __init__(
        self,
        gain_p: Signal,
        gain_i: Signal,
        gain_d: Signal,
        i_min: Signal,
        i_max: Signal,
    ):
        self.gain_p = gain_p
        self.gain_i = gain_i
        self.gain_d = gain_d
        self.i_min = i_min
        self.i_max = i_max

    @classmethod
    def from_bus(cls, bus, axis: str) -> "PIDGainSignals":
        """Bind to the gain signals of an axis on the flight-data bus."""
        return cls(
            gain_p=bus.gain(axis, "gain_p"),
            gain_i=bus.gain(axis, "gain_i"),
            gain_d=bus.gain(axis, "gain_d"),
            i_min=bus.gain(axis, "i_min"),
            i_max=bus.gain(axis, "i_max"),
        )

    def apply(self, pid: PIDState) -> None:
        """Copy the current signal values into the PID gains."""
        pid.p_gain = self.gain_p.get_value()
        pid.i_gain = self.gain_i.get_value()
        pid.d_gain = self.gain_d.get_value()
        pid.i_min = self.i_min.get_value()
        pid.i_max = self.i_max.get_value()

    def set(
        self,
        p: float,
        i: float,
        d: float,
        i_min: float,
        i_max: float,
    ) -> None:
        """Write a complete gain set to the signals."""
        self.gain_p.set_value(p)
        self.gain_i.set_value(i)
        self.gain_d.set_value(d)
        self.i_min.set_value(i_min)
        self.i_max.set_value(i_max)
