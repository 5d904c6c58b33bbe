import functools
import http.client
from datetime import datetime, timedelta, timezone

import pytest

from quietus.config import Settings
from quietus.error_codes import FETCH_INVALID_URL, FETCH_NETWORK, FETCH_TIMEOUT
from quietus.errors import FeedFetchError
from quietus.evaluator import days_inactive, evaluate, find_inactive, is_inactive
from quietus.feed_fetch import fetch_feed
from quietus.schemas import FeedDocument, FeedItem, Organization

NOW = datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc)


def org(name: str) -> Organization:
    return Organization(name=name, feed_url=f"http://{name.lower()}.test/rss")


def feed(published=None, updated=None) -> FeedDocument:
    return FeedDocument(format="rss", items=[FeedItem(title="latest", published=published, updated=updated)])


# ---------- days_inactive ----------

def test_days_inactive_truncates_fractional_days():
    assert days_inactive(NOW - timedelta(days=7.9), now=NOW) == 7


def test_days_inactive_exact_days():
    assert days_inactive(NOW - timedelta(days=7), now=NOW) == 7


def test_days_inactive_future_timestamp_truncates_toward_zero():
    assert days_inactive(NOW + timedelta(hours=12), now=NOW) == 0
    assert days_inactive(NOW + timedelta(days=2.5), now=NOW) == -2


def test_days_inactive_naive_timestamp_is_utc():
    assert days_inactive(datetime(2026, 1, 10, 12, 0), now=NOW) == 10


def test_days_inactive_defaults_to_wall_clock():
    assert days_inactive(datetime.now(timezone.utc) - timedelta(days=7, hours=1)) == 7


# ---------- evaluate / is_inactive ----------

@pytest.mark.parametrize("elapsed, included", [(7, True), (6, False), (8, True)])
def test_threshold_is_inclusive(elapsed, included):
    evaluation = evaluate(org("Acme"), NOW - timedelta(days=elapsed), now=NOW)
    assert evaluation.inactive_days == elapsed
    assert is_inactive(evaluation, 7) is included


def test_no_timestamp_is_never_inactive():
    evaluation = evaluate(org("Acme"), None, now=NOW)
    assert evaluation.evaluable is False
    assert evaluation.inactive_days is None
    assert is_inactive(evaluation, 0) is False


def test_evaluation_records_true_days_below_threshold():
    evaluation = evaluate(org("Acme"), NOW - timedelta(days=2), now=NOW)
    assert evaluation.inactive_days == 2
    assert is_inactive(evaluation, 7) is False


# ---------- find_inactive ----------

def test_find_inactive_keeps_registry_order():
    feeds = {
        "http://zulu.test/rss": feed(published=NOW - timedelta(days=20)),
        "http://alpha.test/rss": feed(published=NOW - timedelta(days=9)),
        "http://mid.test/rss": feed(published=NOW - timedelta(days=1)),
    }
    sweep = find_inactive([org("Zulu"), org("Alpha"), org("Mid")], 7, fetch=feeds.__getitem__, now=NOW)

    assert [(r.name, r.inactive_days) for r in sweep.inactive] == [("Zulu", 20), ("Alpha", 9)]
    assert [e.inactive_days for e in sweep.evaluations] == [20, 9, 1]
    assert sweep.checked == 3


def test_find_inactive_isolates_fetch_failures():
    def fake_fetch(url):
        if url == "http://down.test/rss":
            raise FeedFetchError(url, "timed out", error_code=FETCH_TIMEOUT)
        return feed(published=NOW - timedelta(days=10))

    sweep = find_inactive([org("Down"), org("Acme")], 7, fetch=fake_fetch, now=NOW)

    assert [r.name for r in sweep.inactive] == ["Acme"]
    assert len(sweep.failures) == 1
    failure = sweep.failures[0]
    assert failure.organization.name == "Down"
    assert failure.error_code == FETCH_TIMEOUT
    assert failure.message == "timed out"


def test_find_inactive_skips_feeds_without_timestamp():
    feeds = {
        "http://empty.test/rss": FeedDocument(format="rss", items=[]),
        "http://undated.test/rss": feed(),
    }
    sweep = find_inactive([org("Empty"), org("Undated")], 0, fetch=feeds.__getitem__, now=NOW)

    assert sweep.inactive == []
    assert sweep.failures == []
    assert [e.evaluable for e in sweep.evaluations] == [False, False]


def test_find_inactive_survives_transport_errors(monkeypatch):
    class TruncatedResponse:
        status = 200

        def read(self):
            raise http.client.IncompleteRead(b"<rss", 100)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_urlopen(req, timeout):
        if "abc" in req.full_url:
            raise http.client.InvalidURL("nonnumeric port: 'abc'")
        return TruncatedResponse()

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
    orgs = [
        Organization(name="BadPort", feed_url="http://a.test:abc/rss"),
        Organization(name="Truncated", feed_url="http://t.test/rss"),
    ]

    sweep = find_inactive(orgs, 7, fetch=functools.partial(fetch_feed, settings=Settings()), now=NOW)

    assert [(f.organization.name, f.error_code) for f in sweep.failures] == [
        ("BadPort", FETCH_INVALID_URL),
        ("Truncated", FETCH_NETWORK),
    ]
    assert sweep.inactive == []
