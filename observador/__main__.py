"""Command-line entry point for the El Observador feed aggregator."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from typing import List, Optional

import uvicorn

from .aggregator import aggregate
from .api import create_app
from .config import Config, load_config
from .feeds import FEEDS, available_feeds, find_feed
from .fetchers import FeedFetcher

LOGGER = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate RSS news feeds into one JSON list")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Interface to bind (default from OBSERVADOR_HOST)")
    serve.add_argument("--port", type=int, help="Port to listen on (default from PORT)")

    fetch = subparsers.add_parser("fetch", help="Run one aggregation and print it as JSON")
    fetch.add_argument("--feed", help="Only fetch the feed with this name or slug")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
        args.host = None
        args.port = None
    return args


def run_fetch(config: Config, feed_name: Optional[str]) -> int:
    fetcher = FeedFetcher(config)
    if feed_name:
        feed = find_feed(feed_name)
        if feed is None:
            LOGGER.error("Unknown feed %r, available: %s", feed_name, [f["slug"] for f in available_feeds()])
            return 1
        payload = [item.to_dict() for item in fetcher.fetch(feed)]
    else:
        result = aggregate(FEEDS, fetcher)
        payload = {
            "count": result.count,
            "breakdown": result.breakdown,
            "fetchTime": result.elapsed_seconds,
            "data": result.items_as_dicts(),
        }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config()
    setup_logging(verbose=args.verbose, level=config.log_level)

    if args.command == "fetch":
        return run_fetch(config, args.feed)

    if args.host:
        config = replace(config, host=args.host)
    if args.port:
        config = replace(config, port=args.port)
    LOGGER.info("Starting %d-feed aggregator on %s:%d (cache TTL %ds)", len(FEEDS), config.host, config.port, config.cache_ttl)
    uvicorn.run(create_app(config), host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
