"""Stable failure codes for feed fetch and parse operations.

Used by: feed_fetch, evaluator, logging, the failure summary in report.
"""

FETCH_TIMEOUT = "FETCH_TIMEOUT"
FETCH_HTTP_ERROR = "FETCH_HTTP_ERROR"
FETCH_NETWORK = "FETCH_NETWORK"
FETCH_INVALID_URL = "FETCH_INVALID_URL"
PARSE_ERROR = "PARSE_ERROR"
