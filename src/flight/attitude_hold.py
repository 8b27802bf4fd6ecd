"""
Bandwidth-normalized attitude hold.

A simpler alternative to the stabilization loop: while powered it drives
pitch and roll back to level with no stick handling and no presets. The
measured angles are scaled to the bandwidth of their signals before the
PID sees them.
"""

from typing import Optional, Tuple

import structlog

from components import FlightDataBus, Signal
from config import AttitudeHoldConfig, PIDGainConfig
from .pid import PIDGainSignals, PIDState, update_pid_on_measurement

logger = structlog.get_logger()


class AttitudeHold:
    """
    Levels the vehicle while the power signal is at its high value.

    Owns its own pitch/roll inputs (range -1 to 1, fed in degrees) and
    elevator/aileron outputs so the composition root decides what they are
    wired to. The elevator and aileron gain signals are seeded from
    configuration and read every tick, so they can be tuned live.
    """

    def __init__(self, bus: FlightDataBus, config: Optional[AttitudeHoldConfig] = None):
        """
        Initialize attitude hold.

        Args:
            bus: Flight-data bus whose graph the hold's signals join
            config: Attitude hold configuration
        """
        self.config = config or AttitudeHoldConfig()
        graph = bus.graph

        self.power: Signal = graph.create(low=0.0, high=1.0, name="attitude_hold.power")
        self.pitch: Signal = graph.create(name="attitude_hold.pitch")
        self.roll: Signal = graph.create(name="attitude_hold.roll")
        self.elevator: Signal = graph.create(name="attitude_hold.elevator")
        self.aileron: Signal = graph.create(name="attitude_hold.aileron")

        self.elevator_gains = self._create_gains(graph, "elevator", self.config.elevator)
        self.aileron_gains = self._create_gains(graph, "aileron", self.config.aileron)
        self.pid_elevator = PIDState()
        self.pid_aileron = PIDState()

    @staticmethod
    def _create_gains(graph, surface: str, gains: PIDGainConfig) -> PIDGainSignals:
        signals = PIDGainSignals(*(
            graph.create(low=-100.0, high=100.0, name=f"attitude_hold.{surface}_{term}")
            for term in ("gain_p", "gain_i", "gain_d", "i_min", "i_max")
        ))
        signals.set(gains.p, gains.i, gains.d, gains.i_min, gains.i_max)
        return signals

    @property
    def is_active(self) -> bool:
        """Check if the hold is powered."""
        return self.power.get_value() == self.power.get_high()

    def update(self, time_elapsed: float = 0.0) -> Optional[Tuple[float, float]]:
        """
        Run one hold cycle.

        Args:
            time_elapsed: Seconds since the previous cycle (unused)

        Returns:
            Tuple of (aileron, elevator) written, or None while unpowered
        """
        if not self.is_active:
            return None

        self.elevator_gains.apply(self.pid_elevator)
        self.aileron_gains.apply(self.pid_aileron)

        pitch_signal = self._to_signal(self.pitch)
        elevator = update_pid_on_measurement(self.pid_elevator, -pitch_signal, pitch_signal)
        self.elevator.set_value(elevator)

        roll_signal = self._to_signal(self.roll)
        aileron = -update_pid_on_measurement(self.pid_aileron, -roll_signal, roll_signal)
        self.aileron.set_value(aileron)

        logger.debug("Attitude hold updated", elevator=round(elevator, 3), aileron=round(aileron, 3))
        return aileron, elevator

    def _to_signal(self, angle_signal: Signal) -> float:
        """Clip an angle to the maximum deflection and scale it to the signal range."""
        max_deflection = self.config.max_deflection_deg
        if max_deflection == 0:
            return 0.0
        limit = abs(max_deflection)
        angle = max(-limit, min(angle_signal.get_value(), limit))
        return (angle_signal.get_bandwidth() / 2) * angle / max_deflection

    def get_status_dict(self) -> dict:
        """Get status as dictionary."""
        return {
            "active": self.is_active,
            "elevator": round(self.elevator.get_value(), 3),
            "aileron": round(self.aileron.get_value(), 3),
        }
