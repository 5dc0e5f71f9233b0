"""Command-line interface for the dance floor."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Sequence, Tuple

from rich.console import Console
from rich.table import Table

from dance_floor.config import DancePartyConfig, load_config
from dance_floor.dock import compute_dock_layout
from dance_floor.engine import compute_dance_floor
from dance_floor.faultlog import (
    disable_faulthandler,
    dump_threads,
    enable_faulthandler,
)
from dance_floor.logging_setup import init_logging
from dance_floor.models import DancerRow, DockLayoutEntry, PlacedUnit
from dance_floor.roster import RosterError, first_signup_ts, load_roster
from dance_floor.song import get_song_number
from dance_floor.ui.floor_rendering import describe_unit

logger = logging.getLogger(__name__)


def _parse_now(value: str) -> datetime:
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO timestamp: {value!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _parse_scrub(value: str) -> float:
    try:
        position = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid scrub position: {value!r}") from exc
    if not 0.0 <= position <= 1.0:
        raise argparse.ArgumentTypeError("scrub position must be within 0..1")
    return position


def _parse_song(value: str) -> int:
    try:
        song = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid song number: {value!r}") from exc
    if song < 1:
        raise argparse.ArgumentTypeError("song number must be at least 1")
    return song


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="dance-floor",
        description="Pair a social-dance roster and lay it out on a floor",
    )
    parser.add_argument("roster", help="Path to a CSV or JSON roster")
    parser.add_argument(
        "--title",
        default=None,
        help="Form title used to seed the layout (default: roster file name)",
    )
    parser.add_argument(
        "--song",
        type=_parse_song,
        default=None,
        help="Song number (default: derived from the first signup)",
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="ISO timestamp used as the current time for song numbering",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a config JSON file",
    )
    parser.add_argument(
        "--scrub",
        type=_parse_scrub,
        default=None,
        help="Scrub position 0..1; adds dock scale and offset columns",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Open the interactive viewer",
    )
    return parser


def build_table(
    placed: Sequence[PlacedUnit],
    entries: Optional[Sequence[DockLayoutEntry]] = None,
    *,
    title: Optional[str] = None,
) -> Table:
    """Tabulate placed units, with dock columns when entries are given."""
    table = Table(title=title)
    table.add_column("kind")
    table.add_column("members")
    table.add_column("image", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y offset", justify="right")
    table.add_column("flipped")
    table.add_column("priority", justify="right")
    if entries is not None:
        table.add_column("scale", justify="right")
        table.add_column("dx", justify="right")
    for idx, unit in enumerate(placed):
        row = [
            unit.type,
            describe_unit(unit),
            str(unit.image_num),
            f"{unit.x:.3f}",
            f"{unit.y_offset:+d}",
            "yes" if unit.flipped else "no",
            f"{unit.priority_score:.2f}",
        ]
        if entries is not None:
            entry = entries[idx]
            row.extend([f"{entry.scale:.2f}", f"{entry.dx:+.1f}"])
        table.add_row(*row)
    return table


def _run_tui(
    dancers: Sequence[DancerRow],
    title: str,
    song_number: int,
    config: DancePartyConfig,
    config_path: Optional[Path],
) -> int:
    try:
        from dance_floor.tui import run_tui
    except (ImportError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(
        dancers, title, song_number, config=config, config_path=config_path
    )


def _print_floor(
    placed: Sequence[PlacedUnit],
    title: str,
    song_number: int,
    scrub: Optional[float],
    config: DancePartyConfig,
) -> int:
    entries = None
    if scrub is not None:
        positions = [unit.x for unit in placed]
        entries = compute_dock_layout(positions, scrub, 1.0, config.dock)
    console = Console()
    console.print(build_table(placed, entries, title=f"{title} - song {song_number}"))
    return 0


def _install_excepthooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    if hasattr(threading, "excepthook"):

        def thread_hook(args: threading.ExceptHookArgs) -> None:
            exc_value = args.exc_value or RuntimeError("unknown")
            exc_info: Tuple[
                type[BaseException], BaseException, Optional[TracebackType]
            ] = (
                args.exc_type,
                exc_value,
                args.exc_traceback,
            )
            thread_name = args.thread.name if args.thread else "thread"
            logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)

        threading.excepthook = thread_hook


def _run(args: argparse.Namespace) -> int:
    roster_path = Path(args.roster)
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path)
    try:
        dancers = load_roster(roster_path)
    except RosterError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    title = args.title or roster_path.stem
    if args.song is not None:
        song_number = args.song
    else:
        song_number = get_song_number(first_signup_ts(dancers), args.now)

    if args.tui:
        return _run_tui(dancers, title, song_number, config, config_path)
    placed = compute_dance_floor(dancers, title, song_number, config)
    return _print_floor(placed, title, song_number, args.scrub, config)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    log_path = init_logging()
    enable_faulthandler(log_path)
    _install_excepthooks()
    logger.info("App start")
    try:
        exit_code = _run(args)
    finally:
        disable_faulthandler()
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
