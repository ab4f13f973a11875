"""High-level orchestration for building the merged news list."""

from __future__ import annotations

import concurrent.futures
import logging
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .feeds import FeedDescriptor
from .fetchers import FeedFetcher, FeedOutcome
from .models import UNTITLED, AggregationResult, NewsItem

LOGGER = logging.getLogger(__name__)


def _settle(
    feeds: Sequence[FeedDescriptor], fetcher: FeedFetcher, max_workers: Optional[int]
) -> List[FeedOutcome]:
    """Fetch every feed concurrently and wait for all of them to finish.

    Outcomes come back in registry order. A worker that raises is recorded as
    a failed outcome instead of aborting the batch.
    """

    workers = max_workers or len(feeds)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="feed") as executor:
        futures = [executor.submit(fetcher.fetch_outcome, feed) for feed in feeds]
        concurrent.futures.wait(futures)

    outcomes: List[FeedOutcome] = []
    for feed, future in zip(feeds, futures):
        try:
            outcomes.append(future.result())
        except Exception as exc:
            LOGGER.exception("[%s] fetcher failed unexpectedly: %s", feed.name, exc)
            outcomes.append(FeedOutcome(feed=feed, error=str(exc)))
    return outcomes


def merge_items(outcomes: Sequence[FeedOutcome]) -> List[NewsItem]:
    """Flatten outcomes, drop untitled and duplicate items, sort newest first.

    The first item seen with a given id wins. The sort is stable, so items
    sharing a timestamp keep the order in which their feeds appear in the
    registry.
    """

    merged: List[NewsItem] = []
    seen_ids = set()
    for outcome in outcomes:
        for item in outcome.items:
            if not item.title or item.title == UNTITLED:
                continue
            if item.id in seen_ids:
                LOGGER.debug("Skipping duplicate item: %s", item.id)
                continue
            seen_ids.add(item.id)
            merged.append(item)
    merged.sort(key=lambda item: item.published, reverse=True)
    return merged


def category_breakdown(items: Sequence[NewsItem]) -> Dict[str, int]:
    return dict(Counter(item.category for item in items))


def aggregate(
    feeds: Sequence[FeedDescriptor],
    fetcher: FeedFetcher,
    *,
    max_workers: Optional[int] = None,
) -> AggregationResult:
    LOGGER.info("Fetching %d RSS feeds", len(feeds))
    started = time.perf_counter()
    fetched_at = datetime.now(timezone.utc)

    outcomes = _settle(feeds, fetcher, max_workers) if feeds else []
    items = merge_items(outcomes)
    breakdown = category_breakdown(items)
    elapsed = round(time.perf_counter() - started, 2)

    succeeded = sum(1 for outcome in outcomes if outcome.ok and outcome.items)
    errors = {outcome.feed.name: outcome.error for outcome in outcomes if outcome.error}

    LOGGER.info(
        "Aggregated %d items from %d/%d sources in %.2fs",
        len(items),
        succeeded,
        len(feeds),
        elapsed,
    )
    LOGGER.info("Items by category: %s", breakdown)
    if errors:
        LOGGER.warning("Failed sources: %s", errors)

    return AggregationResult(
        items=tuple(items),
        breakdown=breakdown,
        fetched_at=fetched_at,
        source_count=len(feeds),
        succeeded_count=succeeded,
        elapsed_seconds=elapsed,
        errors=errors,
    )


__all__ = ["aggregate", "category_breakdown", "merge_items"]
