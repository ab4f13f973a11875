"""Conversion of raw feed entries into canonical news items."""

from __future__ import annotations

import calendar
import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from dateutil import parser as date_parser

from .content import clean_html, extract_image, first_text, truncate
from .feeds import FeedDescriptor
from .models import NO_SUMMARY, UNTITLED, NewsItem

LOGGER = logging.getLogger(__name__)

TITLE_MAX_CHARS = 200
SUMMARY_MAX_CHARS = 400

_DATE_FIELDS = ("published", "pubDate", "isoDate", "updated")
_PARSED_DATE_FIELDS = ("published_parsed", "updated_parsed")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_published(raw: Mapping[str, Any]) -> Optional[datetime]:
    """Return the entry's publish date in UTC, or ``None`` if it has none."""

    for name in _DATE_FIELDS:
        value = raw.get(name)
        if isinstance(value, datetime):
            return _as_utc(value)
        if not isinstance(value, str) or not value.strip():
            continue
        try:
            return _as_utc(date_parser.parse(value))
        except (ValueError, TypeError, OverflowError):
            LOGGER.debug("Unparseable date %r in field %s", value, name)

    for name in _PARSED_DATE_FIELDS:
        value = raw.get(name)
        if value is None:
            continue
        try:
            return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
        except (ValueError, TypeError, OverflowError):
            continue
    return None


def _stable_key(raw: Mapping[str, Any]) -> Optional[str]:
    for name in ("guid", "id", "link"):
        value = raw.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _canonical_id(*parts: str) -> str:
    return hashlib.sha256("::".join(parts).encode("utf-8")).hexdigest()


def normalize_item(
    raw: Mapping[str, Any],
    feed: FeedDescriptor,
    *,
    now: Optional[datetime] = None,
    deterministic_ids: bool = False,
) -> NewsItem:
    """Build a :class:`NewsItem` from one raw entry of ``feed``.

    Missing fields are replaced with defaults, so this never raises for a
    mapping input. Items whose title cannot be resolved keep the
    ``UNTITLED`` placeholder and are dropped later by the aggregator.
    """

    now = now or datetime.now(timezone.utc)

    title = truncate(clean_html(first_text(raw, ("title",))), TITLE_MAX_CHARS) or UNTITLED
    summary = truncate(clean_html(first_text(raw)), SUMMARY_MAX_CHARS) or NO_SUMMARY
    published = parse_published(raw) or now

    link = raw.get("link")
    url = link.strip() if isinstance(link, str) and link.strip() else "#"

    key = _stable_key(raw)
    if key is None:
        if deterministic_ids:
            key = _canonical_id(feed.name, title, published.isoformat())
        else:
            key = uuid.uuid4().hex

    return NewsItem(
        id=f"{feed.name}-{key}",
        title=title,
        summary=summary,
        source=feed.name,
        category=feed.category,
        url=url,
        image=extract_image(raw),
        published=published,
    )


__all__ = ["SUMMARY_MAX_CHARS", "TITLE_MAX_CHARS", "normalize_item", "parse_published"]
