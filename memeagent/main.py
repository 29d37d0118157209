"""Main entry point for the meme coin agent."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Optional

from loguru import logger
from telegram.ext import Application

from .bot import build_application
from .config.settings import AgentSettings, get_settings
from .exceptions import ConfigurationError
from .runtime import AgentRuntime, create_agent_runtime
from .scheduler import SingleFlightScheduler
from .utils.logging import setup_logging


async def run(settings: AgentSettings, runtime: AgentRuntime) -> None:
    """Run the cycle scheduler and the Telegram command bot until a signal."""
    stop_event = asyncio.Event()

    def request_stop() -> None:
        if stop_event.is_set():
            return
        logger.info("Shutdown requested")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_stop)
        except NotImplementedError:
            # not available on Windows event loops; KeyboardInterrupt still works
            pass

    app: Optional[Application] = None
    if settings.telegram_token:
        app = build_application(
            settings.telegram_token, runtime.orchestrator.status_text
        )
        await app.initialize()
        await app.start()
        await app.updater.start_polling()
        logger.info("Telegram command bot polling")
    else:
        logger.warning("TELEGRAM_TOKEN not set; /status command disabled")

    scheduler = SingleFlightScheduler(
        runtime.run_cycle, settings.cycle_interval_seconds
    )
    scheduler.start()

    try:
        await stop_event.wait()
    finally:
        await scheduler.stop()
        if app is not None:
            try:
                await app.updater.stop()
                await app.stop()
                await app.shutdown()
            except Exception:
                logger.exception("Failed to stop Telegram bot cleanly")
        try:
            await runtime.close()
        except Exception:
            logger.exception("Failed to close runtime resources")
        logger.info("Bot stopped")


def main() -> None:
    """Load configuration, wire the agent and run until interrupted."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logger.error("Configuration error: {}", exc)
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_dir)

    try:
        runtime = create_agent_runtime(settings)
    except ConfigurationError as exc:
        # CredentialError is a ConfigurationError
        logger.error("Startup failed: {}", exc)
        sys.exit(1)

    try:
        asyncio.run(run(settings, runtime))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught; Bot stopped")


if __name__ == "__main__":
    main()
