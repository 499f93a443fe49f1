"""Tests for formatting utilities."""

from media_herald.formatting import (
    build_heading,
    item_url,
    minutes_to_hhmm,
    parse_runtime_minutes,
    tmdb_image_url,
    truncate,
)
from media_herald.models import parse_event


def test_minutes_to_hhmm():
    assert minutes_to_hhmm(125) == "2h 5m"
    assert minutes_to_hhmm(60) == "1h 0m"
    assert minutes_to_hhmm(42) == "42m"


def test_minutes_to_hhmm_invalid():
    assert minutes_to_hhmm(0) == "N/A"
    assert minutes_to_hhmm(-5) == "N/A"
    assert minutes_to_hhmm(None) == "N/A"
    assert minutes_to_hhmm("90") == "N/A"
    assert minutes_to_hhmm(float("nan")) == "N/A"


def test_parse_runtime_minutes():
    assert parse_runtime_minutes("142 min") == 142
    assert parse_runtime_minutes("N/A") is None
    assert parse_runtime_minutes("") is None
    assert parse_runtime_minutes(None) is None


def test_heading_per_type():
    movie = parse_event({"ItemId": "m", "ItemType": "Movie", "Name": "Heat", "Year": 1995})
    series = parse_event({"ItemId": "s", "ItemType": "Series", "Name": "Lost"})
    season = parse_event(
        {"ItemId": "x", "ItemType": "Season", "SeriesName": "Lost", "Year": 2004, "IndexNumber": 2}
    )
    episode = parse_event(
        {
            "ItemId": "e",
            "ItemType": "Episode",
            "Name": "Pilot",
            "SeriesName": "Lost",
            "IndexNumber": 1,
            "ParentIndexNumber": 1,
        }
    )
    other = parse_event({"ItemId": "a", "ItemType": "Audio"})

    assert build_heading(movie) == ("🎬 New movie added!", "Heat (1995)")
    assert build_heading(series) == ("📺 New TV show added!", "Lost (?)")
    assert build_heading(season) == ("📺 New season added!", "Lost (2004) - Season 2")
    assert build_heading(episode) == ("📺 New episode added!", "Lost - S01E01 - Pilot")
    assert build_heading(other) == ("✨ New item added", "Unknown Title")


def test_item_url():
    event = parse_event(
        {"ItemId": "abc", "ItemType": "Movie", "ServerUrl": "http://jf:8096/", "ServerId": "s1"}
    )
    assert item_url(event) == "http://jf:8096/web/index.html#!/details?id=abc&serverId=s1"


def test_tmdb_image_url():
    assert tmdb_image_url("/x.jpg") == "https://image.tmdb.org/t/p/w780/x.jpg"
    assert tmdb_image_url(None) is None


def test_truncate():
    assert truncate("short", 10) == "short"
    result = truncate("a" * 50, 10)
    assert len(result) == 10
    assert result.endswith("…")


def test_item_url_fallback_base():
    event = parse_event({"ItemId": "abc", "ItemType": "Movie", "ServerId": "s1"})
    assert item_url(event, "https://jf.local/") == "https://jf.local/web/index.html#!/details?id=abc&serverId=s1"

    own = parse_event({"ItemId": "abc", "ItemType": "Movie", "ServerUrl": "http://jf:8096"})
    assert item_url(own, "https://jf.local").startswith("http://jf:8096/web/")
