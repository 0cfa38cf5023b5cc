"""アプリケーションのエントリポイント"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from chatterbox.config import ConfigError, LoggingConfig, load_config
from chatterbox.infrastructure.http.health_server import HealthServer
from chatterbox.runtime import BotFleet

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    # Get root logger
    root_logger = logging.getLogger()

    # Set root level
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # Update handler format if specified
    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    # Configure individual loggers
    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="chatterbox", description="Run a fleet of LLM chat bots."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config.yaml (default: ./config.yaml)",
    )
    return parser.parse_args(argv)


async def main(config_path: Path) -> None:
    """アプリケーションを起動する"""
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    # Apply logging configuration
    configure_logging(config.logging)

    # Set by a shutdown signal or once every bot has stopped
    stop_event = asyncio.Event()

    fleet = BotFleet.from_config(config, on_exhausted=stop_event.set)
    logger.info("Starting %d bot(s): %s", len(fleet.bots), [b.name for b in fleet.bots])
    fleet.start()

    health_server: HealthServer | None = None
    if config.health.enabled:
        health_server = HealthServer(fleet, port=config.health.port)
        await health_server.start()

    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    # Wait for shutdown signal
    await stop_event.wait()

    # Graceful shutdown
    logger.info("Shutting down...")

    if health_server is not None:
        await health_server.stop()

    await fleet.stop(timeout=5.0)

    if fleet.exhausted:
        logger.error("No bot is running, exiting")
        sys.exit(1)

    logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    args = parse_args()
    try:
        asyncio.run(main(args.config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
