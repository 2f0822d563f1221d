# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Badge Row Layout
Packs rating chips left to right. Empty ratings emit nothing and do not
move the cursor, so missing difficulties never leave gaps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from artgen.models.map_info import StarRatings, difficulty_css, is_special_rating

STAR_SUFFIX = " ★"


@dataclass(frozen=True)
class Badge:
    key: str
    x: float
    width: float
    value: str
    color: str
    special: bool

    @property
    def label(self) -> str:
        return self.value if self.special else self.value + STAR_SUFFIX


def layout_badges(
    ratings: Iterable[tuple[str, str, str]],
    default_width: float,
    special_width: float,
    default_spacing: float,
    special_spacing: float,
    start_x: float,
) -> list[Badge]:
    """
    ratings: (key, value, css color) triples in display order.
    Special values (Unranked / Qualified) take the special width/spacing.
    """
    badges: list[Badge] = []
    cursor = start_x
    for key, value, color in ratings:
        if not value:
            continue
        special = is_special_rating(value)
        badges.append(
            Badge(
                key=key,
                x=cursor,
                width=special_width if special else default_width,
                value=value,
                color=color,
                special=special,
            )
        )
        cursor += special_spacing if special else default_spacing
    return badges


def rating_triples(ratings: StarRatings) -> list[tuple[str, str, str]]:
    """StarRatings → (key, value, difficulty color) in display order."""
    return [(key, value, difficulty_css(key)) for key, value in ratings.items()]
