# quietus/errors.py
from __future__ import annotations

from quietus.error_codes import FETCH_NETWORK


class QuietusError(Exception):
    """Base class for every error raised by the inactivity pipeline."""


class InvalidArgumentError(QuietusError, ValueError):
    """Raised when a required input (path, URL) is None or empty."""


class NotFoundError(QuietusError, FileNotFoundError):
    """Raised when the organization registry file does not exist."""


class ParseError(QuietusError, ValueError):
    """Raised for a malformed registry line or an unparsable feed body."""

    def __init__(self, message: str, *, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class FeedParseError(ParseError):
    """Raised when a fetched feed body is not a usable syndication document."""


class FeedFetchError(QuietusError):
    """Raised when a feed cannot be fetched or parsed; carries the URL and cause."""

    def __init__(self, url: str, cause: BaseException | str, *, error_code: str = FETCH_NETWORK):
        self.url = url
        self.cause = cause
        self.error_code = error_code
        super().__init__(f"{error_code}: {url}: {cause}")


class RegistryReadError(QuietusError, OSError):
    """Raised when the registry file exists but cannot be read."""
