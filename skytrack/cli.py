"""Terminal dashboard for SkyTrack.

Usage examples:
    skytrack track BA117
    skytrack track BA117 --once --json
    skytrack recent
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timezone
import json
import logging
import sys

from skytrack.config import settings
from skytrack.db import init_db
from skytrack.presentation import render_panel
from skytrack.services import FlightTracker, RecentSearchStore, TrackingSession

logger = logging.getLogger("skytrack.cli")


def _print_session(session: TrackingSession, as_json: bool) -> None:
    if as_json:
        print(json.dumps(session.snapshot(), indent=2))
    else:
        print(render_panel(session, datetime.now(tz=timezone.utc)))
        print()
    sys.stdout.flush()


async def _track(args) -> int:
    init_db()
    logger.info("Starting tracking session for %s", args.flight)
    tracker = FlightTracker()
    if not args.once:
        tracker.subscribe(lambda session: _print_session(session, args.json))

    session = await tracker.search(args.flight)
    if session.error:
        sys.stderr.write(f"{session.error}\n")
        tracker.close()
        return 1

    if args.once:
        await tracker.scheduler.wait_for_first_tick()
        tracker.close()
        await tracker.scheduler.drain()
        _print_session(session, args.json)
        return 0

    try:
        # Ticks keep printing through the listener until interrupted
        await asyncio.Event().wait()
    finally:
        tracker.close()
    return 0


def cmd_track(args) -> int:
    if not args.flight.strip():
        sys.stderr.write("A flight number is required.\n")
        return 2
    try:
        return asyncio.run(_track(args))
    except KeyboardInterrupt:
        return 130


def cmd_recent(args) -> int:
    init_db()
    items = RecentSearchStore().items
    if args.json:
        print(json.dumps(items))
    elif not items:
        print("No recent searches.")
    else:
        for code in items:
            print(code)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skytrack", description="Track a single flight.")
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: %(default)s)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    track = subparsers.add_parser("track", help="Track a flight until interrupted")
    track.add_argument("flight", help="IATA flight number, e.g. BA117")
    track.add_argument("--once", action="store_true", help="Print one update and exit")
    track.add_argument("--json", action="store_true", help="Emit session JSON")
    track.set_defaults(func=cmd_track)

    recent = subparsers.add_parser("recent", help="List recent searches")
    recent.add_argument("--json", action="store_true", help="Emit a JSON list")
    recent.set_defaults(func=cmd_recent)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
