# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — API Request Schemas
Bodies for the /generate/* endpoints and POST /batch. Keys are accepted
in camelCase (as the desktop exports write them) or snake_case.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from artgen.models.job import JobKind
from artgen.models.map_info import DIFFICULTY_KEYS, MapInfo, StarRatings
from artgen.models.transform import BackgroundTransform


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ─── Generation Requests ─────────────────────────────────────────────────────

class CardRequest(_RequestModel):
    map_info: MapInfo
    star_ratings: StarRatings = Field(default_factory=StarRatings)
    use_background: bool = False


class ReweightCardRequest(_RequestModel):
    map_info: MapInfo
    old_star_ratings: StarRatings = Field(default_factory=StarRatings)
    new_star_ratings: StarRatings = Field(default_factory=StarRatings)
    chosen_difficulty: str = Field("ES", pattern="^(" + "|".join(DIFFICULTY_KEYS) + ")$")


class ThumbnailRequest(_RequestModel):
    """Shared by the batch and playlist thumbnails."""
    background_ref: str = Field(..., min_length=1)
    month_label: str = ""
    transform: Optional[BackgroundTransform] = None


class SsrmThumbnailRequest(_RequestModel):
    map_info: MapInfo
    chosen_difficulty: str = Field("ES", pattern="^(" + "|".join(DIFFICULTY_KEYS) + ")$")
    star_ratings: StarRatings = Field(default_factory=StarRatings)
    background_ref: Optional[str] = None


class ConfigCardRequest(_RequestModel):
    # Validated by the interpreter so schema errors map to INVALID_CARD_CONFIG
    config: dict[str, Any]
    data: dict[str, Any] = Field(default_factory=dict)
    star_ratings: Optional[StarRatings] = None
    use_background: bool = False


class ImageResponse(BaseModel):
    image: str


# ─── Batch ───────────────────────────────────────────────────────────────────

Stars = Union[float, str, None]


class BatchRecord(_RequestModel):
    """
    One row of a qualified-maps or reweights export.
    Qualified rows carry `stars`; reweight rows carry `old_stars` / `new_stars`.
    """
    id: Union[int, str] = ""
    song_hash: str
    song_name: str = ""
    song_sub_name: str = ""
    level_author_name: str = ""
    difficulty: int
    stars: Stars = None
    old_stars: Stars = None
    new_stars: Stars = None


class BatchRequest(_RequestModel):
    kind: JobKind
    records: list[BatchRecord] = Field(default_factory=list)
    # Map documents the batch resolves song hashes against
    maps: list[MapInfo] = Field(default_factory=list)
    use_background: bool = False
