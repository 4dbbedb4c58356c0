"""Bridge entrypoint. Loads and validates config, wires adapters and relay, runs the bus."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from pathlib import Path

from loguru import logger

from discord_irc import __version__
from discord_irc.adapters.base import AdapterBase
from discord_irc.adapters.disc import DiscordAdapter
from discord_irc.adapters.irc import IRCAdapter
from discord_irc.config import Config, load_config_with_env
from discord_irc.errors import ConfigurationError
from discord_irc.gateway import Bus, ChannelRouter, Relay


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )


def build_config(config_path: Path) -> Config:
    """Load and validate config. Raises ConfigurationError."""
    config = Config(load_config_with_env(config_path))
    config.validate()
    return config


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(description="Discord <-> IRC relay bridge")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    try:
        config = build_config(args.config)
        router = ChannelRouter.from_config(config.channel_mapping)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: {}", exc)
        sys.exit(1)
    logger.info("Config loaded from {}", args.config)

    asyncio.run(_run(config, router))


async def _run(config: Config, router: ChannelRouter) -> None:
    """Start adapters, drain the bus until cancelled."""
    bus = Bus()
    discord_adapter = DiscordAdapter(bus, config)
    irc_adapter = IRCAdapter(bus, router, config)
    relay = Relay(
        router,
        irc_adapter,
        discord_adapter,
        command_characters=config.command_characters,
        bridge_bot_names=config.irc_bridge_bot_names,
    )
    bus.register(relay)

    adapters: list[AdapterBase] = [discord_adapter, irc_adapter]
    logger.debug("Connecting to IRC and Discord")
    for adapter in adapters:
        await adapter.start()
    logger.info("Bridge ready: {} mappings", len(router.all_mappings()))

    consumer = asyncio.create_task(bus.run())
    try:
        await consumer
    except asyncio.CancelledError:
        logger.info("Bridge shutting down")
    finally:
        consumer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await consumer
        bus.drain()
        for adapter in adapters:
            await adapter.stop()


if __name__ == "__main__":
    main()
