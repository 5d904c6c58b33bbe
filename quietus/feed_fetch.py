# quietus/feed_fetch.py
from __future__ import annotations

import http.client
import socket
import urllib.error
import urllib.request

from quietus.config import Settings, get_settings
from quietus.error_codes import FETCH_HTTP_ERROR, FETCH_INVALID_URL, FETCH_NETWORK, FETCH_TIMEOUT, PARSE_ERROR
from quietus.errors import FeedFetchError, FeedParseError, InvalidArgumentError
from quietus.feed_parse import parse_feed
from quietus.schemas import FeedDocument


def build_request(url: str, *, user_agent: str) -> urllib.request.Request:
    """Return a GET request for `url` carrying the client identification header."""
    if url is None or not str(url).strip():
        raise InvalidArgumentError("feed url is required")

    try:
        return urllib.request.Request(url, headers={"User-Agent": user_agent})
    # relative or scheme-less URLs like "test.me"
    except ValueError as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_INVALID_URL) from exc


def fetch_feed_body(url: str, *, user_agent: str, timeout_s: float) -> bytes:
    """Fetch a feed URL once and return the raw response bytes. No retries, no caching."""
    req = build_request(url, user_agent=user_agent)

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            # fakes and file:// responses might not have a status attribute
            status = getattr(resp, "status", None)
            body = resp.read()

            if status is not None and not 200 <= status < 300:
                raise FeedFetchError(url, f"HTTP {status}", error_code=FETCH_HTTP_ERROR)

            return body

    # HTTPError is a URLError, so it must come first
    except urllib.error.HTTPError as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_HTTP_ERROR) from exc
    except urllib.error.URLError as exc:
        code = FETCH_TIMEOUT if isinstance(exc.reason, (TimeoutError, socket.timeout)) else FETCH_NETWORK
        raise FeedFetchError(url, exc, error_code=code) from exc
    # bad port, spaces or control characters, rejected by http.client at send time
    except http.client.InvalidURL as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_INVALID_URL) from exc
    # truncated body, bad status line
    except http.client.HTTPException as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_NETWORK) from exc
    except TimeoutError as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_TIMEOUT) from exc
    except OSError as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_NETWORK) from exc
    # anything else urllib raises for a URL it cannot open (unknown scheme handlers)
    except ValueError as exc:
        raise FeedFetchError(url, exc, error_code=FETCH_INVALID_URL) from exc


def fetch_feed(url: str, *, settings: Settings | None = None) -> FeedDocument:
    """Fetch `url` and parse it into a FeedDocument; every failure becomes FeedFetchError."""
    settings = settings or get_settings()

    body = fetch_feed_body(url, user_agent=settings.user_agent, timeout_s=settings.fetch_timeout_s)

    try:
        return parse_feed(body, max_entity_chars=settings.max_entity_chars)
    except FeedParseError as exc:
        raise FeedFetchError(url, exc, error_code=PARSE_ERROR) from exc
