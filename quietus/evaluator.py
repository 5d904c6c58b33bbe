# quietus/evaluator.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from quietus.errors import FeedFetchError
from quietus.feed_fetch import fetch_feed
from quietus.logging_utils import log_event
from quietus.resolver import resolve_publish_date
from quietus.schemas import (
    Evaluation,
    FeedDocument,
    FeedFailure,
    InactivityResult,
    Organization,
    SweepResult,
)

ONE_DAY = timedelta(days=1)


def days_inactive(last_update: datetime, *, now: datetime | None = None) -> int:
    """Whole days between `now` and `last_update`; fractional days are truncated toward zero."""
    now = now or datetime.now(timezone.utc)
    if last_update.tzinfo is None:
        last_update = last_update.replace(tzinfo=timezone.utc)

    elapsed = now - last_update
    # timedelta.days floors, which would round a future timestamp away from zero
    if elapsed < timedelta(0):
        return -((-elapsed) // ONE_DAY)
    return elapsed // ONE_DAY


def evaluate(organization: Organization, resolved: datetime | None, *, now: datetime | None = None) -> Evaluation:
    """Record the true elapsed days for an organization, independent of any threshold."""
    if resolved is None:
        return Evaluation(organization=organization)
    return Evaluation(
        organization=organization,
        last_published=resolved,
        inactive_days=days_inactive(resolved, now=now),
    )


def is_inactive(evaluation: Evaluation, threshold: int) -> bool:
    """Inclusive at the boundary. Evaluations without a timestamp are never inactive."""
    if evaluation.inactive_days is None:
        return False
    return evaluation.inactive_days >= threshold


def find_inactive(
    organizations: Iterable[Organization],
    threshold: int,
    *,
    fetch: Callable[[str], FeedDocument] | None = None,
    now: datetime | None = None,
) -> SweepResult:
    """
    Evaluate every organization in registry order, one fetch at a time.

    A feed that cannot be fetched or parsed is recorded as a FeedFailure and
    the sweep moves on to the next organization.
    """
    fetch = fetch or fetch_feed
    now = now or datetime.now(timezone.utc)
    sweep = SweepResult()
    t0 = time.perf_counter()

    for org in organizations:
        log_event("feed_fetch_started", level=logging.DEBUG, name=org.name, url=org.feed_url)
        try:
            document = fetch(org.feed_url)
        except FeedFetchError as exc:
            log_event(
                "feed_fetch_failed",
                level=logging.WARNING,
                name=org.name,
                url=org.feed_url,
                error_code=exc.error_code,
                error=str(exc.cause),
            )
            sweep.failures.append(FeedFailure(organization=org, error_code=exc.error_code, message=str(exc.cause)))
            continue

        evaluation = evaluate(org, resolve_publish_date(document), now=now)
        sweep.evaluations.append(evaluation)

        if not evaluation.evaluable:
            log_event("feed_not_evaluable", name=org.name, url=org.feed_url, items=len(document.items))
            continue

        log_event(
            "organization_evaluated",
            name=org.name,
            last_published=evaluation.last_published,
            inactive_days=evaluation.inactive_days,
        )
        if is_inactive(evaluation, threshold):
            sweep.inactive.append(InactivityResult(organization=org, inactive_days=evaluation.inactive_days))

    log_event(
        "sweep_finished",
        checked=sweep.checked,
        inactive=len(sweep.inactive),
        failures=len(sweep.failures),
        threshold=threshold,
        elapsed_ms=round((time.perf_counter() - t0) * 1000, 1),
    )
    return sweep
