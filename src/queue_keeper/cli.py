"""Command-line interface for queue-keeper."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Iterable, Optional

from queue_keeper.config import PersistenceConfig, load_config
from queue_keeper.host import LOAD_MODES
from queue_keeper.logging_setup import init_logging
from queue_keeper.player_vlc import VlcPlayer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="queue-keeper",
        description="Terminal queue player that remembers its queue",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or URLs to queue before the saved queue is restored",
    )
    parser.add_argument(
        "--playlist-file",
        default=None,
        help="Where the queue is persisted (supports ~~/ for the config dir)",
    )
    parser.add_argument(
        "--load-mode",
        choices=LOAD_MODES,
        default=None,
        help="Append the saved queue or replace the current one",
    )
    parser.add_argument(
        "--no-load",
        action="store_true",
        help="Do not restore the saved queue on start",
    )
    parser.add_argument(
        "--no-save-on-change",
        action="store_true",
        help="Do not save when the queue changes",
    )
    parser.add_argument(
        "--no-save-on-exit",
        action="store_true",
        help="Do not save when the player exits",
    )
    return parser


def apply_overrides(
    config: PersistenceConfig, args: argparse.Namespace
) -> PersistenceConfig:
    """Return ``config`` with any command-line overrides applied."""
    changes: dict[str, object] = {}
    if args.playlist_file:
        changes["playlist_file"] = args.playlist_file
    if args.load_mode:
        changes["load_mode"] = args.load_mode
    if args.no_load:
        changes["load_on_start"] = False
    if args.no_save_on_change:
        changes["save_on_playlist_change"] = False
    if args.no_save_on_exit:
        changes["save_on_exit"] = False
    if not changes:
        return config
    return dataclasses.replace(config, **changes)


def _run_tui(player: VlcPlayer, config: PersistenceConfig, paths: list[str]) -> int:
    try:
        from queue_keeper.tui import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(player, config, paths)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")

    def excepthook(exc_type, exc, tb) -> None:
        logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = apply_overrides(load_config(), args)
    logger.info("Persistence config: %s", config)

    try:
        player = VlcPlayer()
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    exit_code = _run_tui(player, config, args.paths)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
