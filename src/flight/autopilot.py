"""
Autopilot composition root.

Creates the flight-data bus, wires the control loops to it, applies the
configuration and exposes the control surface used by the CLI and by UI
adapters.
"""

from typing import Dict, Optional

import structlog

from components import FlightDataBus, TwoWaySwitch
from config import AutopilotConfig, GainsConfig
from navigation.mission import MissionController
from .attitude_hold import AttitudeHold
from .pid import PIDGainSignals
from .scheduler import PeriodicTask
from .stabilization import AttitudeStabilizer

logger = structlog.get_logger()


class Autopilot:
    """
    Owns the bus and every control loop.

    Loops:
    - stabilization: holds attitude, passes sticks through when idle
    - navigation: turns mission course errors into a roll preset
    - attitude_hold: bandwidth-normalized hold, powered by a switch
    """

    def __init__(self, config: Optional[AutopilotConfig] = None, bus: Optional[FlightDataBus] = None):
        """
        Initialize autopilot.

        Args:
            config: Autopilot configuration
            bus: Existing bus to wire to (new bus if omitted)
        """
        self.config = config or AutopilotConfig()
        self.bus = bus or FlightDataBus()

        self.stabilizer = AttitudeStabilizer(self.bus, self.config.stabilization)
        self.mission = MissionController(self.bus, self.config.navigation)
        self.attitude_hold = AttitudeHold(self.bus, self.config.attitude_hold)

        # hold outputs reach the actuators only through output2
        self.hold_switches: Dict[str, TwoWaySwitch] = {}
        for surface, actuator in (
            ("elevator", self.bus.elevator_output),
            ("aileron", self.bus.aileron_output),
        ):
            switch = TwoWaySwitch(self.bus.graph, name=f"{surface}_hold_switch")
            getattr(self.attitude_hold, surface).subscribe(switch.input)
            switch.output2.subscribe(actuator)
            self.hold_switches[surface] = switch

        # the elevator switch state powers the attitude hold
        self.hold_switches["elevator"].state.subscribe(self.attitude_hold.power)

        self.bus.pitch.subscribe(self.attitude_hold.pitch)
        self.bus.roll.subscribe(self.attitude_hold.roll)

        self.tasks: Dict[str, PeriodicTask] = {
            "stabilization": PeriodicTask(
                "stabilization", self._stabilization_tick, self.config.stabilization.update_rate_hz
            ),
            "navigation": PeriodicTask(
                "navigation", self.mission.update, self.config.navigation.update_rate_hz
            ),
            "attitude_hold": PeriodicTask(
                "attitude_hold", self.attitude_hold.update, self.config.attitude_hold.update_rate_hz
            ),
        }

        self.apply_gains(self.config.gains)
        self._apply_mission()

        if self.config.attitude_hold.enabled:
            self.toggle_attitude_hold()

    def apply_gains(self, gains: GainsConfig) -> None:
        """Write a gain configuration to the gain signals."""
        for axis in ("pitch", "roll", "course"):
            values = getattr(gains, axis)
            PIDGainSignals.from_bus(self.bus, axis).set(
                values.p, values.i, values.d, values.i_min, values.i_max
            )

    def _apply_mission(self) -> None:
        mission = self.config.mission
        self.mission.set_home(mission.home_lat, mission.home_lon)
        for lat, lon in mission.waypoints:
            self.mission.add_waypoint(lat, lon)

    def _stabilization_tick(self, time_elapsed: float) -> None:
        # the attitude hold owns the actuators while powered
        if self.attitude_hold.is_active:
            return
        self.stabilizer.update(time_elapsed)

    # Control surface

    def start_stabilizing(self) -> None:
        self.stabilizer.start_stabilizing()

    def stop_stabilizing(self) -> None:
        self.stabilizer.stop_stabilizing()

    def start_mission(self) -> None:
        self.mission.start_mission()

    def stop_mission(self) -> None:
        self.mission.stop_mission()

    def go_home(self) -> None:
        self.mission.go_home()

    def toggle_attitude_hold(self) -> bool:
        """
        Switch the attitude hold on or off.

        While on, the hold drives the actuator signals and the stabilization
        loop is skipped.

        Returns:
            True if the hold is now active
        """
        for switch in self.hold_switches.values():
            switch.toggle()
        active = self.attitude_hold.is_active
        logger.info("Attitude hold switched", active=active)
        return active

    def set_update_frequency(self, loop: str, update_rate_hz: float) -> bool:
        """
        Change the tick frequency of a loop.

        Args:
            loop: "stabilization", "navigation" or "attitude_hold"
            update_rate_hz: New frequency, ignored if not positive

        Returns:
            True if the frequency was applied

        Raises:
            ValueError: If the loop name is unknown
        """
        if loop not in self.tasks:
            raise ValueError(f"Unknown loop: {loop}")
        return self.tasks[loop].set_update_frequency(update_rate_hz)

    def start(self) -> None:
        """Start all periodic loops on the running event loop."""
        logger.info("Starting autopilot")
        for task in self.tasks.values():
            task.start()

    async def stop(self) -> None:
        """Stop all periodic loops and wait for them."""
        logger.info("Stopping autopilot")
        for task in self.tasks.values():
            task.request_stop()
        for task in self.tasks.values():
            await task.stop()
        logger.info("Autopilot stopped")

    def get_status(self) -> dict:
        """Get comprehensive status."""
        return {
            "stabilization": self.stabilizer.get_status_dict(),
            "navigation": self.mission.get_status_dict(),
            "attitude_hold": self.attitude_hold.get_status_dict(),
            "position": self.bus.snapshot(
                ["latitude", "longitude", "course_over_ground", "speed_over_ground"], precision=6
            ),
            "attitude": self.bus.snapshot(["pitch", "roll"], precision=2),
            "loops": {
                name: {"hz": task.update_rate_hz, "ticks": task.tick_count, "errors": task.error_count}
                for name, task in self.tasks.items()
            },
        }
