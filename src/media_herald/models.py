"""Core data models for media-herald."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from media_herald.errors import MalformedEventError

# ---------------------------------------------------------------------------
# Item types and granularity
# ---------------------------------------------------------------------------


class ItemType(str, Enum):
    EPISODE = "Episode"
    SEASON = "Season"
    SERIES = "Series"
    MOVIE = "Movie"
    OTHER = "Other"


class Level(IntEnum):
    """How specific a notification is. Higher wins."""

    OTHER = 0
    EPISODE = 1
    SEASON = 2
    SERIES = 3


# ---------------------------------------------------------------------------
# Item-added events
# ---------------------------------------------------------------------------


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _EventBase(BaseModel):
    """Fields every item-added event carries.

    Field aliases match the media server's webhook payload keys, so a raw
    payload can be validated directly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    item_id: str = Field(alias="ItemId")
    name: str | None = Field(default=None, alias="Name")
    year: int | None = Field(default=None, alias="Year")
    overview: str | None = Field(default=None, alias="Overview")
    genres: list[str] = Field(default_factory=list, alias="Genres")
    server_url: str = Field(default="", alias="ServerUrl")
    server_id: str | None = Field(default=None, alias="ServerId")
    tmdb_id: str | None = Field(default=None, alias="Provider_tmdb")
    imdb_id: str | None = Field(default=None, alias="Provider_imdb")

    @field_validator(
        "item_id",
        "server_id",
        "tmdb_id",
        "imdb_id",
        "series_id",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator(
        "year",
        "index_number",
        "parent_index_number",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _coerce_number(cls, value: Any) -> Any:
        # Display-only numbers; anything unparseable is dropped, not rejected.
        value = _blank_to_none(value)
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @field_validator("genres", mode="before")
    @classmethod
    def _split_genres(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [g.strip() for g in value.split(",") if g.strip()]
        if not isinstance(value, (list, tuple)):
            return []
        return [g for g in value if g is not None]

    @field_validator("server_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.rstrip("/")
        return value


class MovieEvent(_EventBase):
    item_type: Literal[ItemType.MOVIE] = Field(default=ItemType.MOVIE, alias="ItemType")


class _SeriesScopedEvent(_EventBase):
    series_id: str | None = Field(default=None, alias="SeriesId")
    series_name: str | None = Field(default=None, alias="SeriesName")


class SeriesEvent(_SeriesScopedEvent):
    item_type: Literal[ItemType.SERIES] = Field(default=ItemType.SERIES, alias="ItemType")


class SeasonEvent(_SeriesScopedEvent):
    item_type: Literal[ItemType.SEASON] = Field(default=ItemType.SEASON, alias="ItemType")
    index_number: int | None = Field(default=None, alias="IndexNumber")


class EpisodeEvent(_SeriesScopedEvent):
    item_type: Literal[ItemType.EPISODE] = Field(default=ItemType.EPISODE, alias="ItemType")
    index_number: int | None = Field(default=None, alias="IndexNumber")
    parent_index_number: int | None = Field(default=None, alias="ParentIndexNumber")


class OtherEvent(_EventBase):
    item_type: Literal[ItemType.OTHER] = Field(default=ItemType.OTHER, alias="ItemType")
    raw_type: str | None = None
    """Item type name as sent by the server (e.g. "Audio", "Book")."""


ItemAddedEvent = Annotated[
    Union[MovieEvent, SeriesEvent, SeasonEvent, EpisodeEvent, OtherEvent],
    Field(discriminator="item_type"),
]

_event_adapter: TypeAdapter[ItemAddedEvent] = TypeAdapter(ItemAddedEvent)


def parse_event(raw: dict[str, Any]) -> ItemAddedEvent:
    """Build the typed event variant for a raw webhook payload.

    Unknown item types become :class:`OtherEvent`, keeping the server's
    type name in ``raw_type``.

    Raises:
        MalformedEventError: If the payload lacks a usable item id.
            Display fields with odd values are coerced or dropped.
    """
    if not isinstance(raw, dict):
        raise MalformedEventError("Payload is not an object")

    data = dict(raw)
    type_name = str(data.get("ItemType") or "").strip()
    try:
        item_type = ItemType(type_name)
    except ValueError:
        item_type = ItemType.OTHER
    data["ItemType"] = item_type
    if item_type is ItemType.OTHER:
        data["raw_type"] = type_name or None

    try:
        return _event_adapter.validate_python(data)
    except ValidationError as e:
        raise MalformedEventError(f"Invalid item-added payload: {e.error_count()} error(s)") from e


# ---------------------------------------------------------------------------
# Guild configuration
# ---------------------------------------------------------------------------


class GuildConfig(BaseModel):
    """Notification settings for one guild (tenant)."""

    guild_id: str
    notification_channel_id: str | None = None
    jellyfin_server_url: str | None = None
    color_notification: str = "#cba6f7"
    color_success: str = "#a6d189"
    color_search: str = "#ef9f76"
    ephemeral_responses: bool = False

    @field_validator("guild_id", "notification_channel_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def is_notification_ready(self) -> bool:
        return bool(self.notification_channel_id and self.jellyfin_server_url)


# ---------------------------------------------------------------------------
# Engine values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Classification:
    """Result of classifying an event."""

    level: Level
    aggregation_key: str | None = None


@dataclass(frozen=True)
class SuppressionRecord:
    """Highest level already notified for an aggregation key."""

    level: Level
    updated_at: float


class SubmitOutcome(str, Enum):
    SCHEDULED = "scheduled"
    """First event for the key; a flush was scheduled."""
    MERGED = "merged"
    """Replaced the held event of a pending aggregation."""
    KEPT = "kept"
    """A more specific event is already held; the new one was discarded."""
    SUPPRESSED = "suppressed"
    """An equal or higher level was already notified."""


class HandleOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    DEBOUNCED = "debounced"
    SUPPRESSED = "suppressed"


# ---------------------------------------------------------------------------
# Composed notifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinkButton:
    label: str
    url: str


@dataclass
class NotificationPayload:
    """Everything a sink needs to render a notification."""

    author: str
    title: str
    url: str
    color: str
    header: str
    overview: str
    genres: str
    runtime: str
    rating: str
    item_type: ItemType
    level: Level
    image_url: str | None = None
    buttons: list[LinkButton] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Callback type aliases
# ---------------------------------------------------------------------------

FlushCallback = Callable[[Hashable, ItemAddedEvent, Level, Any], Awaitable[bool]]
"""(key, event, level, context) → True if the notification was delivered"""
