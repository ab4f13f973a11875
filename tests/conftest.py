from __future__ import annotations

from typing import Dict, List

import pytest
import requests

from observador.config import Config
from observador.feeds import FeedDescriptor

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>{title}</title>
    {items}
  </channel>
</rss>
"""

ITEM_TEMPLATE = """
    <item>
      <title>{title}</title>
      <link>https://example.com/{slug}/{index}</link>
      <guid>https://example.com/{slug}/{index}</guid>
      <description><![CDATA[<p>Story {index} from {slug}</p>]]></description>
      <pubDate>Mon, 01 Jan 2024 {hour:02d}:00:00 GMT</pubDate>
    </item>
"""


def make_rss(slug: str, count: int, first_hour: int = 10) -> bytes:
    items = "".join(
        ITEM_TEMPLATE.format(title=f"{slug} headline {i}", slug=slug, index=i, hour=(first_hour - i) % 24)
        for i in range(count)
    )
    return RSS_TEMPLATE.format(title=slug, items=items).encode("utf-8")


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Serves canned bodies per URL; a URL mapped to an exception raises it."""

    def __init__(self, routes: Dict[str, object]) -> None:
        self.routes = routes
        self.calls: List[dict] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        target = self.routes.get(url)
        if target is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(target, Exception):
            raise target
        if isinstance(target, FakeResponse):
            return target
        return FakeResponse(target)


@pytest.fixture()
def config() -> Config:
    return Config(max_items_per_feed=10, fetch_timeout=10)


@pytest.fixture()
def tech_feed() -> FeedDescriptor:
    return FeedDescriptor("Tech Daily", "https://tech.example.com/rss", "tecnologia")


@pytest.fixture()
def world_feed() -> FeedDescriptor:
    return FeedDescriptor("World Wire", "https://world.example.com/rss", "internacional")


@pytest.fixture()
def broken_feed() -> FeedDescriptor:
    return FeedDescriptor("Broken Feed", "https://broken.example.com/rss", "cultura")
