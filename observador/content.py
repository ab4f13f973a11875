"""Helpers for cleaning feed markup and locating article images."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"'>]+)[\"']", re.IGNORECASE)

# Raw content fields in the order they are preferred for the summary.
SUMMARY_FIELDS = ("contentSnippet", "content", "content:encoded", "description", "summary")
# Raw markup fields that may embed an <img> tag.
MARKUP_FIELDS = ("content", "content:encoded", "description", "summary")


def clean_html(text: Optional[str]) -> str:
    """Strip tags, decode entities and collapse whitespace."""

    if not text:
        return ""
    if "<" in text or "&" in text:
        text = BeautifulSoup(text, "html.parser").get_text()
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(text: str, limit: int) -> str:
    return text[:limit]


def text_value(value: Any) -> str:
    """Return the text carried by a raw field.

    feedparser stores rich content as a list of ``{"value": ...}`` blocks while
    simpler parsers hand back plain strings; both shapes are accepted.
    """

    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        inner = value.get("value")
        return inner if isinstance(inner, str) else ""
    if isinstance(value, (list, tuple)):
        for block in value:
            text = text_value(block)
            if text.strip():
                return text
    return ""


def first_text(raw: Mapping[str, Any], fields=SUMMARY_FIELDS) -> str:
    for name in fields:
        text = text_value(raw.get(name))
        if text.strip():
            return text
    return ""


def _url_from(value: Any, *keys: str) -> Optional[str]:
    """Pull a URL out of a media-style field.

    Handles attribute-style encodings (``{"$": {"url": ...}}``), direct
    properties (``{"url": ...}``) and lists of either.
    """

    if isinstance(value, (list, tuple)):
        for element in value:
            url = _url_from(element, *keys)
            if url:
                return url
        return None
    if not isinstance(value, Mapping):
        return None
    attrs = value.get("$")
    if isinstance(attrs, Mapping):
        url = _url_from(attrs, *keys)
        if url:
            return url
    for key in keys:
        url = value.get(key)
        if isinstance(url, str) and url.strip():
            return url.strip()
    return None


def extract_image(raw: Mapping[str, Any]) -> Optional[str]:
    """Resolve the best image URL for a raw entry, or ``None``."""

    candidates = (
        (raw.get("enclosure"), ("url", "href")),
        (raw.get("enclosures"), ("href", "url")),
        (raw.get("media_thumbnail") or raw.get("media:thumbnail"), ("url",)),
        (raw.get("media_content") or raw.get("media:content"), ("url",)),
        (raw.get("image"), ("url", "href")),
    )
    for value, keys in candidates:
        url = _url_from(value, *keys)
        if url:
            return url

    for name in MARKUP_FIELDS:
        markup = text_value(raw.get(name))
        match = _IMG_SRC_RE.search(markup)
        if match:
            return match.group(1)
    return None


__all__ = [
    "SUMMARY_FIELDS",
    "clean_html",
    "extract_image",
    "first_text",
    "text_value",
    "truncate",
]
