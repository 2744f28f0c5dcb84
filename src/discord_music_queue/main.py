#!/usr/bin/env python3
"""Operator entry point for inspecting and resetting guild queues."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from discord_music_queue.domain.shared.exceptions import DomainError
from discord_music_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from discord_music_queue.application.services.queue_service import MusicQueue
    from discord_music_queue.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="discord-music-queue",
        description="Inspect and reset per-guild music queues in the store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ping                 # Check the store is reachable
  %(prog)s show 123456789       # Print a guild's queue
  %(prog)s clear 123456789      # Delete every key of a guild's queue
        """,
    )
    parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=25,
        help="maximum number of pending songs to print (default: 25)",
    )

    subparsers = parser.add_subparsers(dest="action", required=True)
    subparsers.add_parser("ping", help="check the store connection")
    show = subparsers.add_parser("show", help="print current song, pending songs and flags")
    show.add_argument("guild_id", type=int)
    clear = subparsers.add_parser("clear", help="delete all queue state for a guild")
    clear.add_argument("guild_id", type=int)

    return parser


def _queue_for(container: Container, guild_id: int) -> MusicQueue:
    import discord

    # Never logged in; only needed to satisfy the player provider.
    container.set_client(discord.Client(intents=discord.Intents.none()))
    return container.queue_registry.get(guild_id)


async def _show(queue: MusicQueue, limit: int) -> None:
    np = await queue.now_playing()
    if np is None:
        print(f"[guild {queue.guild_id}] nothing loaded")
    else:
        print(f"[guild {queue.guild_id}] current: {np.song.title} @ {np.position_ms}ms")

    print(f"  replay:       {await queue.get_replay()}")
    print(f"  system pause: {await queue.get_system_paused()}")
    print(f"  volume:       {await queue.get_volume()}")
    print(f"  text channel: {await queue.get_text_channel_id()}")

    total = await queue.count()
    print(f"  pending:      {total}")
    for index, song in enumerate(await queue.tracks(0, limit - 1)):
        print(f"    {index:>3}. {song.title}")
    if total > limit:
        print(f"    ... {total - limit} more")


async def _run(args: argparse.Namespace, container: Container) -> int:
    try:
        if args.action == "ping":
            await container.store.ping()
            print("[ok] store reachable")
        elif args.action == "show":
            await _show(_queue_for(container, args.guild_id), args.limit)
        elif args.action == "clear":
            removed = await _queue_for(container, args.guild_id).clear()
            print(f"[ok] removed {removed} key(s) for guild {args.guild_id}")
        return 0
    finally:
        await container.close()


def main(argv: list[str] | None = None) -> int:
    from discord_music_queue.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.debug(LogTemplates.CLI_STARTING, settings.environment)

    from discord_music_queue.config.container import create_container

    container = create_container(settings)

    try:
        return asyncio.run(_run(args, container))
    except KeyboardInterrupt:
        return 0
    except DomainError as e:
        logger.error(LogTemplates.CLI_FATAL_ERROR, e)
        print(f"[err] {e}")
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
