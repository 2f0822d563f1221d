# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Map Data Models
MapInfo mirrors the BeatSaver map document (camelCase on the wire,
snake_case in Python). StarRatings holds one display value per
difficulty in fixed display order.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ─── Difficulty Tables ───────────────────────────────────────────────────────

DIFFICULTY_KEYS: tuple[str, ...] = ("ES", "NOR", "HARD", "EX", "EXP")

DIFFICULTY_NAMES: dict[str, str] = {
    "ES": "Easy",
    "NOR": "Normal",
    "HARD": "Hard",
    "EX": "Expert",
    "EXP": "Expert+",
}

# RGB, matches the in-game difficulty palette
DIFFICULTY_COLORS: dict[str, tuple[int, int, int]] = {
    "ES": (22, 163, 74),
    "NOR": (59, 130, 246),
    "HARD": (249, 115, 22),
    "EX": (220, 38, 38),
    "EXP": (126, 34, 206),
}
UNKNOWN_DIFFICULTY_COLOR: tuple[int, int, int] = (128, 128, 128)

# Leaderboard difficulty numbers used by qualified / reweight exports
DIFFICULTY_NUMBERS: dict[int, str] = {1: "ES", 3: "NOR", 5: "HARD", 7: "EX", 9: "EXP"}

SPECIAL_RATINGS: frozenset[str] = frozenset({"Unranked", "Qualified"})


def difficulty_color(key: str) -> tuple[int, int, int]:
    return DIFFICULTY_COLORS.get(key, UNKNOWN_DIFFICULTY_COLOR)


def difficulty_css(key: str) -> str:
    r, g, b = difficulty_color(key)
    return f"rgb({r}, {g}, {b})"


def is_special_rating(value: str) -> bool:
    """Unranked / Qualified badges carry no star and use the wide chip."""
    return value in SPECIAL_RATINGS


def format_rating_value(value: Any) -> str:
    """
    Normalise a raw rating to its display string.
    None -> "", integral floats drop the fraction (5.0 -> "5").
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


# ─── MapInfo ─────────────────────────────────────────────────────────────────

class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class MapMetadata(_CamelModel):
    song_name: str
    song_sub_name: str = ""
    song_author_name: str = ""
    level_author_name: str = ""
    duration: int = 0       # seconds
    bpm: float = 0.0


class MapVersion(_CamelModel):
    cover_url: str = Field(alias="coverURL")
    hash: str
    preview_url: Optional[str] = Field(default=None, alias="previewURL")


class MapInfo(_CamelModel):
    """Immutable map description; versions[0] is the canonical version."""
    id: str
    metadata: MapMetadata
    versions: list[MapVersion] = Field(min_length=1)

    @property
    def latest(self) -> MapVersion:
        return self.versions[0]

    @property
    def cover_url(self) -> str:
        return self.versions[0].cover_url

    def hashes(self) -> set[str]:
        return {v.hash.lower() for v in self.versions}


def format_duration(seconds: int) -> str:
    """M:SS, e.g. 185 -> '3:05'."""
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"


# ─── StarRatings ─────────────────────────────────────────────────────────────

class StarRatings(BaseModel):
    """
    One display value per difficulty. Empty string means the difficulty
    does not exist for the map and must never produce a badge.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    ES: str = ""
    NOR: str = ""
    HARD: str = ""
    EX: str = ""
    EXP: str = ""

    @field_validator("ES", "NOR", "HARD", "EX", "EXP", mode="before")
    @classmethod
    def _normalise(cls, v: Any) -> str:
        return format_rating_value(v)

    def get(self, key: str) -> str:
        return getattr(self, key, "") if key in DIFFICULTY_KEYS else ""

    def items(self) -> list[tuple[str, str]]:
        """(key, value) pairs in display order, empties included."""
        return [(key, getattr(self, key)) for key in DIFFICULTY_KEYS]

    def present(self) -> list[tuple[str, str]]:
        return [(k, v) for k, v in self.items() if v]

    def with_rating(self, key: str, value: Any) -> "StarRatings":
        if key not in DIFFICULTY_KEYS:
            raise KeyError(key)
        return self.model_copy(update={key: format_rating_value(value)})
