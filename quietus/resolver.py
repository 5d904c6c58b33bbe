# quietus/resolver.py
"""
Resolve the effective publish date of a feed.

Feeds are trusted to list their newest item first; nothing is re-sorted.
Pure functions, never raise for a parsed FeedDocument.
"""
from __future__ import annotations

from datetime import datetime

from quietus.schemas import FeedDocument, FeedItem


def most_recent_item(document: FeedDocument) -> FeedItem | None:
    if not document.items:
        return None
    return document.items[0]


def resolve_item_timestamp(item: FeedItem) -> datetime | None:
    """
    Primary publish date if the item has one, else its last-updated date.

    This is a fallback, not a max: a valid publish date wins even when the
    last-updated date is more recent.
    """
    if item.published is not None:
        return item.published
    return item.updated


def resolve_publish_date(document: FeedDocument) -> datetime | None:
    item = most_recent_item(document)
    if item is None:
        return None
    return resolve_item_timestamp(item)
