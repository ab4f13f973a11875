"""FastAPI application exposing the aggregated news."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .aggregator import aggregate
from .cache import NewsCache
from .config import Config, load_config
from .feeds import FEEDS, FeedDescriptor, available_feeds, feeds_by_category, find_feed
from .fetchers import FeedFetcher

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "El Observador Backend"
SERVICE_VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"success": False, "error": message, **extra, "timestamp": _now()}
    return JSONResponse(status_code=status_code, content=body)


def create_app(
    config: Optional[Config] = None,
    feeds: Sequence[FeedDescriptor] = FEEDS,
    fetcher: Optional[FeedFetcher] = None,
    cache: Optional[NewsCache] = None,
) -> FastAPI:
    """Build the HTTP app around one registry, fetcher and cache."""

    config = config or load_config()
    feeds = tuple(feeds)
    fetcher = fetcher or FeedFetcher(config)
    cache = cache or NewsCache(ttl=config.cache_ttl)
    started = time.monotonic()

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.feeds = feeds
    app.state.fetcher = fetcher
    app.state.cache = cache

    @app.get("/api/news")
    def get_news(request: Request):
        LOGGER.info("News requested by %s", request.client.host if request.client else "unknown")
        try:
            cached = cache.get()
            if cached is not None:
                LOGGER.info("Serving %d items from cache", cached.count)
                return {
                    "success": True,
                    "data": cached.items_as_dicts(),
                    "count": cached.count,
                    "sources": len(feeds),
                    "cached": True,
                    "timestamp": _now(),
                }

            result = aggregate(feeds, fetcher)
            cache.set(result)
            return {
                "success": True,
                "data": result.items_as_dicts(),
                "count": result.count,
                "breakdown": result.breakdown,
                "sources": len(feeds),
                "fetchTime": result.elapsed_seconds,
                "cached": False,
                "timestamp": _now(),
            }
        except Exception as exc:
            LOGGER.exception("News aggregation failed: %s", exc)
            return _error(500, str(exc))

    @app.get("/health")
    def health():
        stats = cache.stats()
        return {
            "status": "ok",
            "uptime": round(time.monotonic() - started, 3),
            "cache": {"keys": stats.keys, "hits": stats.hits, "misses": stats.misses},
            "feeds": len(feeds),
            "timestamp": _now(),
        }

    @app.get("/api/test/{feed_name}")
    def test_feed(feed_name: str):
        feed = find_feed(feed_name, feeds)
        if feed is None:
            return _error(404, "Feed not found", available=available_feeds(feeds))
        try:
            items = fetcher.fetch(feed)
        except Exception as exc:
            LOGGER.exception("[%s] test fetch failed: %s", feed.name, exc)
            return _error(500, str(exc))
        return {
            "success": True,
            "feed": feed.name,
            "category": feed.category,
            "count": len(items),
            "data": [item.to_dict() for item in items],
        }

    @app.post("/api/cache/clear")
    def clear_cache():
        cache.clear()
        return {"success": True, "message": "Cache cleared", "timestamp": _now()}

    @app.get("/api/stats")
    def stats():
        cache_stats = cache.stats()
        current = cache.peek()
        return {
            "success": True,
            "feeds": {"total": len(feeds), "byCategory": feeds_by_category(feeds)},
            "cache": {
                "enabled": True,
                "ttl": cache.ttl,
                "keys": cache_stats.keys,
                "hits": cache_stats.hits,
                "misses": cache_stats.misses,
                "hitRate": cache_stats.hit_rate,
            },
            "currentNews": current.count if current else 0,
            "timestamp": _now(),
        }

    @app.get("/")
    def root():
        return {
            "name": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "news": "/api/news",
                "health": "/health",
                "stats": "/api/stats",
                "test": "/api/test/{feed_name}",
                "clearCache": "/api/cache/clear (POST)",
            },
            "feeds": len(feeds),
            "roster": [feed.to_dict() for feed in feeds],
            "status": "running",
        }

    return app


__all__ = ["SERVICE_NAME", "SERVICE_VERSION", "create_app"]
