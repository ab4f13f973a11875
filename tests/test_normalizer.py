from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import feedparser

from observador.models import NO_SUMMARY, UNTITLED
from observador.normalizer import normalize_item, parse_published

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_title_is_cleaned(tech_feed):
    item = normalize_item({"title": "<b>Hi</b> &amp; Bye", "link": "https://x.test/1"}, tech_feed, now=NOW)
    assert item.title == "Hi & Bye"


def test_title_and_summary_are_capped(tech_feed):
    raw = {"title": "t" * 500, "description": "d" * 1000, "guid": "g-1"}
    item = normalize_item(raw, tech_feed, now=NOW)
    assert len(item.title) == 200
    assert len(item.summary) == 400


def test_missing_fields_receive_defaults(tech_feed):
    item = normalize_item({}, tech_feed, now=NOW)
    assert item.title == UNTITLED
    assert item.summary == NO_SUMMARY
    assert item.url == "#"
    assert item.image is None
    assert item.published == NOW
    assert item.verified is True
    assert item.source == "Tech Daily"
    assert item.category == "tecnologia"


def test_summary_preference_order(tech_feed):
    raw = {
        "title": "x",
        "content": [{"value": "<p>Rich content</p>"}],
        "description": "Description",
        "summary": "Summary",
    }
    assert normalize_item(raw, tech_feed, now=NOW).summary == "Rich content"
    raw["contentSnippet"] = "Plain snippet"
    assert normalize_item(raw, tech_feed, now=NOW).summary == "Plain snippet"


def test_id_uses_guid_then_link(tech_feed):
    with_guid = normalize_item({"title": "a", "guid": "abc", "link": "https://x.test/a"}, tech_feed, now=NOW)
    assert with_guid.id == "Tech Daily-abc"
    with_link = normalize_item({"title": "a", "link": "https://x.test/a"}, tech_feed, now=NOW)
    assert with_link.id == "Tech Daily-https://x.test/a"
    assert with_link.url == "https://x.test/a"


def test_id_fallback_is_random_by_default(tech_feed):
    first = normalize_item({"title": "same"}, tech_feed, now=NOW)
    second = normalize_item({"title": "same"}, tech_feed, now=NOW)
    assert first.id.startswith("Tech Daily-")
    assert first.id != second.id


def test_id_fallback_can_be_deterministic(tech_feed):
    raw = {"title": "same", "pubDate": "Mon, 01 Jan 2024 10:00:00 GMT"}
    first = normalize_item(raw, tech_feed, now=NOW, deterministic_ids=True)
    second = normalize_item(raw, tech_feed, now=NOW + timedelta(hours=1), deterministic_ids=True)
    assert first.id == second.id


def test_published_parsing_normalizes_to_utc():
    parsed = parse_published({"pubDate": "Mon, 01 Jan 2024 10:00:00 +0200"})
    assert parsed == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    naive = parse_published({"published": "2024-01-01T10:00:00"})
    assert naive == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_published_falls_back_to_struct_time_and_now(tech_feed):
    struct = time.strptime("2024-03-05 06:07:08", "%Y-%m-%d %H:%M:%S")
    assert parse_published({"published_parsed": struct}) == datetime(2024, 3, 5, 6, 7, 8, tzinfo=timezone.utc)
    item = normalize_item({"title": "x", "pubDate": "not a date"}, tech_feed, now=NOW)
    assert item.published == NOW


def test_feedparser_entry_end_to_end(tech_feed):
    xml = """
    <rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
      <channel>
        <title>Example</title>
        <item>
          <title>Chip &amp; Cloud</title>
          <link>https://tech.example.com/chips</link>
          <guid>chips-1</guid>
          <description><![CDATA[<p>Silicon <img src="https://tech.example.com/inline.jpg"> news</p>]]></description>
          <media:thumbnail url="https://tech.example.com/thumb.jpg" />
          <pubDate>Tue, 02 Jan 2024 09:30:00 GMT</pubDate>
        </item>
      </channel>
    </rss>
    """
    entry = feedparser.parse(xml).entries[0]
    item = normalize_item(entry, tech_feed, now=NOW)
    assert item.title == "Chip & Cloud"
    assert item.summary == "Silicon news"
    assert item.image == "https://tech.example.com/thumb.jpg"
    assert item.id == "Tech Daily-chips-1"
    assert item.published == datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)
    assert item.to_dict()["published"] == "2024-01-02T09:30:00+00:00"
