"""Main entry point for the telemetry bus demo."""

import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from sim import Sim
from telemetry_bus import Application
from telemetry_bus.config import load_settings
from telemetry_bus.logging_config import setup_logging


async def run() -> None:
    """Run the application with the SIM scenario."""
    settings = load_settings()
    setup_logging(settings.log_level, str(settings.log_file))

    app = Application(settings)
    await app.start()

    sim = Sim(
        event_bus=app.event_bus,
        navigation_tracker=app.navigation_tracker,
        delay=float(os.getenv("SIM_DELAY", "0.5")),
    )
    try:
        await sim.start()
        await sim.wait()
    finally:
        await sim.stop()
        await app.stop()


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    asyncio.run(run())


if __name__ == "__main__":
    main()
