"""Static registry of the RSS feeds aggregated by the service."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

_WHITESPACE_RE = re.compile(r"\s+")


def slugify(name: str) -> str:
    return _WHITESPACE_RE.sub("-", name.lower())


@dataclass(frozen=True)
class FeedDescriptor:
    """One upstream feed: its label, location and category tag."""

    name: str
    url: str
    category: str
    priority: int = 1

    @property
    def slug(self) -> str:
        return slugify(self.name)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "slug": self.slug,
            "url": self.url,
            "category": self.category,
            "priority": self.priority,
        }


FEEDS: tuple[FeedDescriptor, ...] = (
    # Internacional
    FeedDescriptor("BBC News", "http://feeds.bbci.co.uk/news/rss.xml", "internacional", 1),
    FeedDescriptor("Reuters", "http://feeds.reuters.com/reuters/topNews", "internacional", 1),
    FeedDescriptor("Al Jazeera", "https://www.aljazeera.com/xml/rss/all.xml", "internacional", 2),
    # España
    FeedDescriptor(
        "El País",
        "https://feeds.elpais.com/mrss-s/pages/ep/site/elpais.com/portada",
        "españa",
        1,
    ),
    FeedDescriptor("El Mundo", "https://e00-elmundo.uecdn.es/elmundo/rss/portada.xml", "españa", 1),
    FeedDescriptor("20 Minutos", "https://www.20minutos.es/rss/", "españa", 2),
    # Guipúzcoa
    FeedDescriptor(
        "Diariovasco",
        "https://www.diariovasco.com/rss/2.0/?section=gipuzkoa",
        "guipuzcoa",
        1,
    ),
    FeedDescriptor(
        "Noticias de Gipuzkoa",
        "https://www.noticiasdegipuzkoa.eus/rss/portada.xml",
        "guipuzcoa",
        2,
    ),
    # Tecnología
    FeedDescriptor("TechCrunch", "https://techcrunch.com/feed/", "tecnologia", 1),
    FeedDescriptor("The Verge", "https://www.theverge.com/rss/index.xml", "tecnologia", 1),
    FeedDescriptor("Wired", "https://www.wired.com/feed/rss", "tecnologia", 2),
    FeedDescriptor("Ars Technica", "https://feeds.arstechnica.com/arstechnica/index", "tecnologia", 2),
    # Cultura
    FeedDescriptor("The Guardian Culture", "https://www.theguardian.com/culture/rss", "cultura", 1),
    FeedDescriptor("El Cultural", "https://www.elespanol.com/el-cultural/rss", "cultura", 2),
)


def find_feed(name: str, feeds: Iterable[FeedDescriptor] = FEEDS) -> Optional[FeedDescriptor]:
    """Look up a feed by case-insensitive name or slug."""

    wanted = name.strip().lower()
    for feed in feeds:
        if feed.slug == wanted or feed.name.lower() == wanted:
            return feed
    return None


def available_feeds(feeds: Iterable[FeedDescriptor] = FEEDS) -> List[Dict[str, str]]:
    return [{"name": feed.name, "slug": feed.slug} for feed in feeds]


def feeds_by_category(feeds: Iterable[FeedDescriptor] = FEEDS) -> Dict[str, int]:
    return dict(Counter(feed.category for feed in feeds))


__all__ = [
    "FEEDS",
    "FeedDescriptor",
    "available_feeds",
    "feeds_by_category",
    "find_feed",
    "slugify",
]
