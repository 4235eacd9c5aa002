"""Pydantic models for the CBB explorer."""

import datetime as dt
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    GUEST = "guest"
    CHARACTER = "character"


class SortKey(str, Enum):
    MOST_APPEARANCES = "most_appearances"
    MOST_RECENT = "most_recent"
    FIRST_APPEARANCE = "first_appearance"
    ALPHABETICAL = "alphabetical"


class ColorMode(str, Enum):
    GUESTS = "guests"
    CHARACTERS = "characters"
    CHARS_PER_GUEST = "chars_per_guest"


# --- Raw input models (what comes out of the data file) ---


class RawEpisode(BaseModel):
    """One episode record as found in the data file, abbreviated keys or not."""
    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", validation_alias=AliasChoices("t", "title"))
    number: str | None = Field(default=None, validation_alias=AliasChoices("n", "number"))
    date: str | None = Field(
        default=None, validation_alias=AliasChoices("d", "date", "dateString"),
    )
    guests: list[str] = Field(default_factory=list, validation_alias=AliasChoices("g", "guests"))
    characters: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("c", "characters"),
    )
    image_url: str | None = Field(
        default=None, validation_alias=AliasChoices("i", "imageUrl", "image_url"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("number", "date", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # Episode numbers show up as ints in some exports
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("guests", "characters", mode="before")
    @classmethod
    def _list_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class RawCorpus(BaseModel):
    """The whole data file: episodes plus optional name-keyed lookups."""
    model_config = ConfigDict(extra="ignore")

    episodes: list[RawEpisode] = Field(default_factory=list)
    guest_characters: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("guestCharacters", "guestToCharacters", "guest_characters"),
    )
    guest_images: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("guestImages", "guest_images"),
    )
    character_images: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("characterImages", "character_images"),
    )
    # Optional true cast list: character -> guests who voiced it
    character_cast: dict[str, list[str]] = Field(
        default_factory=dict, validation_alias=AliasChoices("characterCast", "character_cast"),
    )

    # Episode records that failed validation and were left out
    rejected: int = 0

    @model_validator(mode="before")
    @classmethod
    def _drop_invalid_episodes(cls, data: Any) -> Any:
        """Validate episode records one by one so a bad record drops alone."""
        if not isinstance(data, dict):
            return data
        records = data.get("episodes")
        if records is None:
            records = []
        if not isinstance(records, list):
            return data
        kept: list[RawEpisode] = []
        rejected = 0
        for i, record in enumerate(records):
            try:
                kept.append(RawEpisode.model_validate(record))
            except ValidationError as e:
                logger.debug("Dropping episode record %d: %d validation errors", i, e.error_count())
                rejected += 1
        return {**data, "episodes": kept, "rejected": rejected}

    @field_validator(
        "guest_characters", "guest_images", "character_images", "character_cast", mode="before",
    )
    @classmethod
    def _mapping_or_empty(cls, v: Any) -> Any:
        return {} if v is None else v


# --- Normalized models (immutable once built) ---


class Episode(BaseModel):
    """A normalized episode. `index` is its position in chronological order."""
    model_config = ConfigDict(frozen=True)

    index: int
    title: str
    number: str | None = None
    date: dt.date
    guests: tuple[str, ...] = ()
    characters: tuple[str, ...] = ()
    image_url: str | None = None
    year: int
    week: int
    num_guests: int
    num_characters: int
    characters_per_guest: float | None = None  # None when there are no guests
    is_live: bool = False


class EntityRecord(BaseModel):
    """A guest or character with every episode it appears in."""
    model_config = ConfigDict(frozen=True)

    name: str
    kind: EntityKind
    episode_indices: tuple[int, ...]
    first_index: int
    last_index: int
    image_url: str | None = None
    played_by: frozenset[str] = frozenset()  # characters only

    @property
    def appearances(self) -> int:
        return len(self.episode_indices)


class AggregateStats(BaseModel):
    """Corpus-wide maxima used for color and size scaling."""
    model_config = ConfigDict(frozen=True)

    max_episodes_per_year_with_live: int = 0
    max_episodes_per_year_without_live: int = 0
    max_guests_per_episode: int = 0
    max_characters_per_episode: int = 0
    max_characters_per_guest_per_episode: float = 0.0

    def max_row_cardinality(self, include_live: bool) -> int:
        if include_live:
            return self.max_episodes_per_year_with_live
        return self.max_episodes_per_year_without_live


@dataclass(frozen=True)
class Corpus:
    """Everything derived from one raw corpus load. Read-only after build."""
    episodes: tuple[Episode, ...] = ()
    guests: dict[str, EntityRecord] = field(default_factory=dict)
    characters: dict[str, EntityRecord] = field(default_factory=dict)
    episodes_by_year: dict[int, tuple[Episode, ...]] = field(default_factory=dict)
    years: tuple[int, ...] = ()
    guest_characters: dict[str, tuple[str, ...]] = field(default_factory=dict)
    stats: AggregateStats = field(default_factory=AggregateStats)
    dropped: int = 0

    @property
    def has_data(self) -> bool:
        return bool(self.episodes)

    def index_for(self, kind: EntityKind) -> dict[str, EntityRecord]:
        return self.guests if kind == EntityKind.GUEST else self.characters
