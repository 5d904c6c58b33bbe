# quietus/report.py
"""Plain-text rendering of sweep results. Pure functions, no I/O."""
from __future__ import annotations

from typing import Iterable

from quietus.schemas import FeedFailure, InactivityResult

LINE_SEPARATOR = "\n"


def render_inactivity_report(results: Iterable[InactivityResult]) -> str:
    """
    One line per inactive organization, in input order, after a leading
    separator. No results -> just the separator.
    """
    report = LINE_SEPARATOR
    for result in results:
        report += f"{result.name} feed has been inactive for {result.inactive_days} day(s).{LINE_SEPARATOR}"
    return report


def render_failure_summary(failures: Iterable[FeedFailure]) -> str:
    lines = [
        f"{f.organization.name} feed could not be checked ({f.error_code}): {f.message}"
        for f in failures
    ]
    if not lines:
        return ""
    return LINE_SEPARATOR.join(lines) + LINE_SEPARATOR
