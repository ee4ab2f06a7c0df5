"""
Application entry points for the article housekeeping service.

Usage:
    # Run the background scheduler with the configured tasks
    python main.py scheduler

    # Preview a routine once (dry run is the default)
    python main.py run article.archive --param age_days=90 --param source_category=8

    # Apply a routine once
    python main.py run article.move --param target_category=12 --execute

    # List available routines
    python main.py routines
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any


def _parse_params(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` strings into a parameter bag."""
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        params[key.strip()] = value.strip()
    return params


def run_routines() -> int:
    """Print the registered housekeeping routines."""
    from src.housekeeping import ROUTINES

    for routine in ROUTINES.values():
        print(f"{routine.id:<20} {routine.title}")
        print(f"{'':<20} {routine.description}")
    return 0


def run_once(routine_id: str, params: dict[str, Any]) -> int:
    """Run one routine immediately and return its status code."""
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from src.config import get_settings
    from src.housekeeping import UnknownRoutineError, get_routine
    from src.logger import setup_logging
    from src.workers.housekeeping import run_housekeeping_task

    try:
        get_routine(routine_id)
    except UnknownRoutineError as exc:
        print(f"Error: {exc}. Available: {', '.join(exc.context['available'])}", file=sys.stderr)
        return 2

    settings = get_settings()
    setup_logging(settings)

    async def _run() -> int:
        engine = create_async_engine(str(settings.database.url), echo=settings.database.echo)
        try:
            session_factory = async_sessionmaker(engine, expire_on_commit=False)
            result = await run_housekeeping_task(
                session_factory,
                settings,
                task_id="cli",
                routine=routine_id,
                params=params,
            )
            return int(result.status)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def run_scheduler() -> int:
    """Run the background task scheduler."""
    from src.workers.scheduler import main as scheduler_main

    return scheduler_main()


def main() -> int:
    """Main entry point with subcommand routing."""
    parser = argparse.ArgumentParser(
        description="Article Housekeeping Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scheduler subcommand
    subparsers.add_parser("scheduler", help="Run background task scheduler")

    # Run subcommand
    run_parser = subparsers.add_parser("run", help="Run one routine immediately")
    run_parser.add_argument("routine", help="Routine id, e.g. article.archive")
    run_parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Task parameter (repeatable)",
    )
    run_parser.add_argument(
        "--execute",
        action="store_true",
        help="Apply the update instead of a dry run",
    )

    # Routines subcommand
    subparsers.add_parser("routines", help="List available routines")

    args = parser.parse_args()

    if args.command == "scheduler":
        return run_scheduler()
    elif args.command == "run":
        try:
            params = _parse_params(args.param)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))
        if args.execute:
            params["dry_run"] = "0"
        return run_once(args.routine, params)
    elif args.command == "routines":
        return run_routines()
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
