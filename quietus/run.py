# quietus/run.py
from __future__ import annotations

import argparse
import functools
import logging
import sys
from typing import Callable

from quietus.config import Settings, get_settings
from quietus.errors import QuietusError
from quietus.evaluator import find_inactive
from quietus.feed_fetch import fetch_feed
from quietus.logging_utils import log_event
from quietus.registry import load_registry
from quietus.report import render_failure_summary, render_inactivity_report

FAILURE_MESSAGE = "Unable to generate the inactivity report."


def _parse_days(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def resolve_inactivity_period(
    arg: str | None, *, default: int, prompt: Callable[[str], str] | None = None
) -> int:
    """
    Threshold from the command line; otherwise ask once, otherwise the default.
    """
    prompt = prompt or input
    days = _parse_days(arg)
    if days is not None:
        return days

    print("Please provide the duration of the inactivity period in days.")
    try:
        answer = prompt("")
    except EOFError:
        answer = None

    days = _parse_days(answer)
    if days is None:
        print(f"Unable to parse user input, using default period of {default} days.")
        return default
    return days


def main(argv: list[str] | None = None, *, settings: Settings | None = None) -> int:
    settings = settings or get_settings()

    p = argparse.ArgumentParser(
        prog="quietus",
        description="Report organizations whose news feeds have gone quiet.",
    )
    p.add_argument("registry_path", nargs="?", default=settings.registry_path,
                   help="file with one 'Name,FeedUrl' per line")
    p.add_argument("inactivity_days", nargs="?", default=None,
                   help="days without a new item before a feed counts as inactive")
    args = p.parse_args(argv)

    threshold = resolve_inactivity_period(args.inactivity_days, default=settings.default_inactivity_days)
    if threshold < 0:
        print(f"Inactivity period must be zero or more days, got {threshold}.", file=sys.stderr)
        return 2

    try:
        organizations = load_registry(args.registry_path)
    except QuietusError as exc:
        log_event("run_failed", level=logging.ERROR, stage="registry",
                  error_type=type(exc).__name__, error=str(exc))
        print(FAILURE_MESSAGE, file=sys.stderr)
        return 1

    log_event("registry_loaded", path=str(args.registry_path), organizations=len(organizations))

    sweep = find_inactive(
        organizations,
        threshold,
        fetch=functools.partial(fetch_feed, settings=settings),
    )

    print(render_inactivity_report(sweep.inactive))
    if sweep.failures:
        print(render_failure_summary(sweep.failures), file=sys.stderr, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
