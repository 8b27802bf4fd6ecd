"""
Attitude stabilization loop.

Stabilizes pitch and roll while the pilot's sticks are centered and passes
stick input straight to the actuators otherwise. The roll angle the vehicle
is held at can be preset externally, which is how the navigation loop steers.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import structlog

from components import FlightDataBus, Signal
from config import StabilizationConfig
from .modes import StabilizationMode
from .pid import PIDGainSignals, PIDState, update_pid

logger = structlog.get_logger()


@dataclass
class AxisLoop:
    """Signals, PID state and default-angle tracker of one control axis."""
    name: str
    stick: Signal  # from a stick control
    angle: Signal  # from a motion sensor
    preset: Signal  # from the mission controller
    trim: Signal
    output: Signal  # to an actuator
    gains: PIDGainSignals
    preset_sign: float  # roll adds the preset, pitch subtracts it
    output_sign: float  # aileron is reversed against the servo sense
    pid: PIDState = field(default_factory=PIDState)
    default_angle: float = 0.0  # degrees, 0 = level


class AttitudeStabilizer:
    """
    Holds roll and pitch using one PID controller per axis.

    Each tick, per axis:
    - stick centered and stabilizing: level the default angle toward 0 and
      let the PID correct the attitude error
    - stick moved or idle: pass the stick through and remember the current
      attitude as the angle to hold once the stick is released
    """

    def __init__(self, bus: FlightDataBus, config: Optional[StabilizationConfig] = None):
        """
        Initialize stabilizer.

        Args:
            bus: Flight-data bus to read from and write to
            config: Stabilization configuration
        """
        self.bus = bus
        self.config = config or StabilizationConfig()
        self._mode = StabilizationMode.IDLE

        self.roll = AxisLoop(
            name="roll",
            stick=bus.aileron_input,
            angle=bus.roll,
            preset=bus.roll_preset,
            trim=bus.roll_trim,
            output=bus.aileron_output,
            gains=PIDGainSignals.from_bus(bus, "roll"),
            preset_sign=1.0,
            output_sign=-1.0,
        )
        self.pitch = AxisLoop(
            name="pitch",
            stick=bus.elevator_input,
            angle=bus.pitch,
            preset=bus.pitch_preset,
            trim=bus.pitch_trim,
            output=bus.elevator_output,
            gains=PIDGainSignals.from_bus(bus, "pitch"),
            preset_sign=-1.0,
            output_sign=1.0,
        )

    @property
    def mode(self) -> StabilizationMode:
        """Get current stabilization mode."""
        return self._mode

    @property
    def is_stabilizing(self) -> bool:
        return self._mode == StabilizationMode.STABILIZING

    @property
    def default_roll_angle(self) -> float:
        return self.roll.default_angle

    @property
    def default_pitch_angle(self) -> float:
        return self.pitch.default_angle

    def start_stabilizing(self) -> None:
        """Start stabilizing attitude."""
        if self._mode != StabilizationMode.STABILIZING:
            self._mode = StabilizationMode.STABILIZING
            logger.info("Stabilization started")

    def stop_stabilizing(self) -> None:
        """Stop stabilizing, sticks pass straight through."""
        if self._mode != StabilizationMode.IDLE:
            self._mode = StabilizationMode.IDLE
            logger.info("Stabilization stopped")

    def update(self, time_elapsed: float) -> Tuple[float, float]:
        """
        Run one stabilization cycle.

        Args:
            time_elapsed: Seconds since the previous cycle

        Returns:
            Tuple of (aileron, elevator) values written to the actuators
        """
        aileron = self._update_axis(self.roll, time_elapsed)
        elevator = self._update_axis(self.pitch, time_elapsed)
        return aileron, elevator

    def _update_axis(self, axis: AxisLoop, time_elapsed: float) -> float:
        value = axis.stick.get_value()

        if self._mode == StabilizationMode.STABILIZING and abs(value) <= self.config.stick_deadband:
            self._level_default_angle(axis, time_elapsed)
            axis.gains.apply(axis.pid)

            error = (
                axis.angle.get_value()
                - axis.default_angle
                + axis.preset_sign * axis.preset.get_value()
                - axis.trim.get_value()
            )
            correction = update_pid(axis.pid, error)
            value = self._to_actuator(correction) * axis.output_sign
        else:
            axis.default_angle = axis.angle.get_value()

        axis.output.set_value(value)
        return value

    def _level_default_angle(self, axis: AxisLoop, time_elapsed: float) -> None:
        step = self.config.correction_rate_deg_s * time_elapsed
        if axis.default_angle > 0:
            axis.default_angle = max(axis.default_angle - step, 0.0)
        else:
            axis.default_angle = min(axis.default_angle + step, 0.0)

    def _to_actuator(self, correction: float) -> float:
        """Clip a correction angle and scale it to the actuator range."""
        max_angle = self.config.max_attitude_angle_deg
        if max_angle == 0:
            return 0.0
        limit = abs(max_angle)
        correction = max(-limit, min(correction, limit))
        return correction / max_angle

    def get_status_dict(self) -> dict:
        """Get status as dictionary."""
        return {
            "mode": self._mode.value,
            "default_roll_angle": round(self.roll.default_angle, 2),
            "default_pitch_angle": round(self.pitch.default_angle, 2),
            "aileron": round(self.roll.output.get_value(), 3),
            "elevator": round(self.pitch.output.get_value(), 3),
        }
