#!/usr/bin/env python3
"""
uavpilot - Main Entry Point

Fixed-wing autopilot core: attitude stabilization and waypoint navigation.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import structlog

from config import AutopilotConfig, get_config
from flight.autopilot import Autopilot
from flight.scheduler import PeriodicTask
from simulation import SimulatedVehicle

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


class UAVPilot:
    """
    Main autopilot application.

    Runs the autopilot loops, optionally closed over a simulated vehicle,
    and logs a periodic status line.
    """

    def __init__(
        self,
        config: AutopilotConfig,
        simulate: bool = False,
        stabilize: bool = True,
        fly_mission: bool = True,
    ):
        """
        Initialize application.

        Args:
            config: System configuration
            simulate: Close the loop over a simulated vehicle
            stabilize: Start stabilizing at startup
            fly_mission: Start the configured mission at startup
        """
        self.config = config
        self.simulate = simulate
        self.stabilize = stabilize
        self.fly_mission = fly_mission

        self.autopilot: Optional[Autopilot] = None
        self.vehicle: Optional[SimulatedVehicle] = None
        self._vehicle_task: Optional[PeriodicTask] = None
        self._stopped = asyncio.Event()

    async def start(self) -> bool:
        """
        Start the system.

        Returns:
            True if started successfully
        """
        logger.info("Starting uavpilot")

        self.autopilot = Autopilot(self.config)

        if self.simulate:
            mission = self.config.mission
            self.vehicle = SimulatedVehicle(
                self.autopilot.bus,
                self.config.simulation,
                latitude=mission.home_lat,
                longitude=mission.home_lon,
            )
            self._vehicle_task = PeriodicTask(
                "vehicle", self.vehicle.update, self.config.simulation.update_rate_hz
            )
            self._vehicle_task.start()

        if self.stabilize:
            self.autopilot.start_stabilizing()

        if self.fly_mission:
            if self.config.mission.waypoints:
                self.autopilot.start_mission()
            else:
                logger.warning("No waypoints in mission, circling home")
                self.autopilot.go_home()

        self.autopilot.start()
        logger.info("uavpilot started", simulate=self.simulate)
        return True

    async def stop(self) -> None:
        """Stop the system."""
        if self._stopped.is_set():
            return

        logger.info("Stopping uavpilot")

        if self.autopilot:
            self.autopilot.stop_mission()
            await self.autopilot.stop()

        if self._vehicle_task:
            await self._vehicle_task.stop()

        self._stopped.set()
        logger.info("uavpilot stopped")

    async def run(self, duration: Optional[float] = None) -> None:
        """
        Run until stopped or for a fixed duration.

        Args:
            duration: Seconds to run, unlimited if None
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration if duration else None
        interval = self.config.status_interval_s

        try:
            while not self._stopped.is_set():
                timeout = interval
                if deadline is not None:
                    remaining = deadline - loop.time()
                    if remaining <= 0:
                        logger.info("Run duration elapsed", duration=duration)
                        await self.stop()
                        break
                    timeout = min(interval, remaining)

                try:
                    await asyncio.wait_for(self._stopped.wait(), timeout=timeout)
                except asyncio.TimeoutError:
                    self._log_status()

        except asyncio.CancelledError:
            pass

    def _log_status(self) -> None:
        if not self.autopilot:
            return
        status = self.autopilot.get_status()
        position = status["position"]
        logger.info(
            "Status",
            navigation=status["navigation"]["mode"],
            waypoint=status["navigation"]["current_waypoint"],
            home_km=status["navigation"]["home_distance_km"],
            lat=position["latitude"],
            lon=position["longitude"],
            course=round(position["course_over_ground"], 1),
            target=status["navigation"]["target_course"],
            roll=status["attitude"]["roll"],
        )


async def main_async(
    config: AutopilotConfig,
    simulate: bool = False,
    duration: Optional[float] = None,
    stabilize: bool = True,
    fly_mission: bool = True,
) -> int:
    """
    Async main entry point.

    Args:
        config: System configuration
        simulate: Close the loop over a simulated vehicle
        duration: Seconds to run, unlimited if None
        stabilize: Start stabilizing at startup
        fly_mission: Start the configured mission at startup

    Returns:
        Exit code
    """
    app = UAVPilot(config, simulate=simulate, stabilize=stabilize, fly_mission=fly_mission)

    # Setup signal handlers
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(app.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    if not await app.start():
        return 1

    await app.run(duration)
    return 0


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="uavpilot - Fixed-wing autopilot core"
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Configuration file path (YAML)",
    )

    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Fly a simulated vehicle instead of waiting for telemetry",
    )

    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds",
    )

    parser.add_argument(
        "--no-stabilize",
        action="store_true",
        help="Start with stabilization off (sticks pass through)",
    )

    parser.add_argument(
        "--no-mission",
        action="store_true",
        help="Do not start the configured mission",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    # Load configuration
    if args.config:
        config = get_config(args.config)
    else:
        # Try default config location
        default_config = Path(__file__).parent.parent / "config" / "default.yaml"
        config = get_config(default_config)

    logger.info(
        "Configuration loaded",
        waypoints=len(config.mission.waypoints),
        home=f"{config.mission.home_lat},{config.mission.home_lon}",
        completed_action=config.navigation.mission_completed_action,
    )

    # Run async main
    try:
        return asyncio.run(main_async(
            config,
            simulate=args.simulate,
            duration=args.duration,
            stabilize=not args.no_stabilize,
            fly_mission=not args.no_mission,
        ))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
