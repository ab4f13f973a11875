"""Retrieval and normalization of a single RSS feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import feedparser
import requests

from .config import Config
from .feeds import FeedDescriptor
from .models import NewsItem
from .normalizer import normalize_item

LOGGER = logging.getLogger(__name__)


class FeedParseError(Exception):
    """Raised when an upstream document cannot be read as a feed."""


@dataclass
class FeedOutcome:
    """Tagged result of fetching one feed: its items, or why it failed."""

    feed: FeedDescriptor
    items: List[NewsItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FeedFetcher:
    """Fetch one feed over HTTP, parse it and normalize its first entries.

    ``session`` only needs a ``get(url, headers=..., timeout=...)`` method and
    defaults to the ``requests`` module; ``parse`` defaults to
    :func:`feedparser.parse`.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Any = None,
        parse: Callable[[bytes], Any] = feedparser.parse,
    ) -> None:
        self.config = config or Config()
        self.session = session or requests
        self.parse = parse

    def retrieve(self, feed: FeedDescriptor) -> List[Any]:
        """Download and parse ``feed``, returning its raw entries."""

        response = self.session.get(
            feed.url,
            headers=self.config.request_headers,
            timeout=self.config.fetch_timeout,
        )
        response.raise_for_status()

        parsed = self.parse(response.content)
        entries = list(parsed.get("entries") or [])
        if parsed.get("bozo") and not entries:
            reason = parsed.get("bozo_exception") or "unreadable document"
            raise FeedParseError(f"malformed feed: {reason}")
        if parsed.get("bozo"):
            LOGGER.warning("[%s] feed is not well formed, using %d entries anyway", feed.name, len(entries))
        return entries

    def fetch_outcome(self, feed: FeedDescriptor) -> FeedOutcome:
        LOGGER.info("[%s] fetching feed", feed.name)
        try:
            entries = self.retrieve(feed)
            now = datetime.now(timezone.utc)
            items = [
                normalize_item(entry, feed, now=now, deterministic_ids=self.config.deterministic_ids)
                for entry in entries[: self.config.max_items_per_feed]
            ]
        except (requests.RequestException, FeedParseError) as exc:
            LOGGER.error("[%s] feed failed: %s", feed.name, exc)
            return FeedOutcome(feed=feed, error=str(exc))
        except Exception as exc:
            LOGGER.exception("[%s] feed failed unexpectedly: %s", feed.name, exc)
            return FeedOutcome(feed=feed, error=str(exc))

        LOGGER.info("[%s] %d items fetched", feed.name, len(items))
        return FeedOutcome(feed=feed, items=items)

    def fetch(self, feed: FeedDescriptor) -> List[NewsItem]:
        """Return the feed's normalized items, or an empty list on failure."""

        return self.fetch_outcome(feed).items


__all__ = ["FeedFetcher", "FeedOutcome", "FeedParseError"]
