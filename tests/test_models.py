"""Tests for event parsing and guild config."""

import pytest

from media_herald.errors import MalformedEventError
from media_herald.models import (
    EpisodeEvent,
    GuildConfig,
    ItemType,
    MovieEvent,
    OtherEvent,
    SeasonEvent,
    parse_event,
)


def test_parse_episode():
    event = parse_event(
        {
            "ItemId": "ep1",
            "ItemType": "Episode",
            "Name": "Pilot",
            "SeriesId": "s1",
            "SeriesName": "Show",
            "IndexNumber": 1,
            "ParentIndexNumber": 2,
            "ServerUrl": "https://jf.example.com/",
            "Provider_tmdb": "1399",
        }
    )
    assert isinstance(event, EpisodeEvent)
    assert event.item_type is ItemType.EPISODE
    assert event.series_id == "s1"
    assert event.parent_index_number == 2
    assert event.server_url == "https://jf.example.com"
    assert event.tmdb_id == "1399"


def test_parse_season_numeric_ids():
    event = parse_event({"ItemId": 42, "ItemType": "Season", "SeriesId": 7, "IndexNumber": "3"})
    assert isinstance(event, SeasonEvent)
    assert event.item_id == "42"
    assert event.series_id == "7"
    assert event.index_number == 3


def test_parse_movie_ignores_series_fields():
    event = parse_event({"ItemId": "m1", "ItemType": "Movie", "SeriesId": "s1", "Year": 1999})
    assert isinstance(event, MovieEvent)
    assert not hasattr(event, "series_id")
    assert event.year == 1999


def test_parse_unknown_type_becomes_other():
    event = parse_event({"ItemId": "a1", "ItemType": "Audio", "Name": "Song"})
    assert isinstance(event, OtherEvent)
    assert event.raw_type == "Audio"


def test_parse_genres_string_or_list():
    assert parse_event({"ItemId": "x", "ItemType": "Movie", "Genres": "Drama, Crime"}).genres == [
        "Drama",
        "Crime",
    ]
    assert parse_event({"ItemId": "x", "ItemType": "Movie", "Genres": ["Comedy"]}).genres == [
        "Comedy"
    ]


def test_parse_blank_year_is_none():
    event = parse_event({"ItemId": "x", "ItemType": "Movie", "Year": ""})
    assert event.year is None


def test_parse_missing_item_id():
    with pytest.raises(MalformedEventError):
        parse_event({"ItemType": "Movie"})


def test_parse_not_a_dict():
    with pytest.raises(MalformedEventError):
        parse_event(["ItemId"])


def test_event_is_frozen():
    event = parse_event({"ItemId": "x", "ItemType": "Movie"})
    with pytest.raises(Exception):
        event.name = "changed"


def test_guild_config_ready():
    assert GuildConfig(
        guild_id="g", notification_channel_id="1", jellyfin_server_url="http://jf"
    ).is_notification_ready
    assert not GuildConfig(guild_id="g", notification_channel_id="1").is_notification_ready
    assert not GuildConfig(guild_id="g", jellyfin_server_url="http://jf").is_notification_ready


def test_guild_config_int_ids():
    config = GuildConfig(guild_id=123, notification_channel_id=456)
    assert config.guild_id == "123"
    assert config.notification_channel_id == "456"
    assert config.color_notification == "#cba6f7"


def test_parse_odd_display_values_are_kept_or_dropped():
    event = parse_event(
        {"ItemId": "x", "ItemType": "Movie", "Name": 1984, "Year": "unknown", "Genres": 7}
    )
    assert isinstance(event, MovieEvent)
    assert event.name == "1984"
    assert event.year is None
    assert event.genres == []


def test_parse_odd_episode_numbers_are_dropped():
    event = parse_event(
        {
            "ItemId": "e1",
            "ItemType": "Episode",
            "SeriesId": "s1",
            "IndexNumber": "special",
            "ParentIndexNumber": True,
        }
    )
    assert event.index_number is None
    assert event.parent_index_number is None


def test_parse_unusable_item_id():
    with pytest.raises(MalformedEventError):
        parse_event({"ItemId": "  ", "ItemType": "Movie"})
    with pytest.raises(MalformedEventError):
        parse_event({"ItemId": {"nested": 1}, "ItemType": "Movie"})
