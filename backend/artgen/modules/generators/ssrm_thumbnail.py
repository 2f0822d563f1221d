# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — SSRM Thumbnail (1920×1080)
Diagonal gradient frame around a rounded, blurred background; a dark
left panel carrying the map metadata, the chosen difficulty's rating
box and a square cover; a dotted divider in the difficulty colour.
"""

from __future__ import annotations

from typing import Optional

from artgen.models.map_info import (
    DIFFICULTY_NAMES,
    MapInfo,
    StarRatings,
    difficulty_css,
    is_special_rating,
)
from artgen.modules.generators.common import (
    COVER_SHADOW,
    heebo,
    load_optional,
    load_required,
    metadata_block,
    render_to_data_uri,
)
from artgen.modules.generators.script import (
    DottedLine,
    DrawImage,
    DrawRatingLabel,
    FillLinearGradient,
    FillRoundedRect,
    LayoutScript,
    PopClip,
    PushClip,
    StrokeRoundedRect,
)

SSRM_W = 1920
SSRM_H = 1080

_GRADIENT = ("rgb(15, 8, 208)", "rgb(155, 11, 57)")
_FRAME = (20, 20, 1880, 1040)
_FRAME_RADIUS = 50
_PANEL = (20, 20, 620, 1040)
_PANEL_COLOR = "rgb(20, 20, 20)"
_COVER = (75, 495, 510, 510)
_OUTLINE = 10

_TEXT_X = 50
_TEXT_MAX_W = 560

_RATING_BOX = (75, 360, 510, 100)
_RATING_CENTER = (330, 410)

_DOTS_X = 640
_DOTS_Y = (50, 1030)
_DOT_SPACING = 60
_DOT_RADIUS = 15


def build_ssrm_script(
    map_info: MapInfo, chosen_difficulty: str, star_ratings: StarRatings
) -> LayoutScript:
    script = LayoutScript(SSRM_W, SSRM_H)
    color = difficulty_css(chosen_difficulty)

    script.add(FillLinearGradient(0, 0, SSRM_W, SSRM_H, _GRADIENT))

    script.add(PushClip(*_FRAME, radius=_FRAME_RADIUS))
    x, y, w, h = _FRAME
    script.add(DrawImage("background", x, y, w, h, crop_ratio=16 / 9, blur=10))
    script.add(FillRoundedRect(*_PANEL, radius=_FRAME_RADIUS, color=_PANEL_COLOR))
    x, y, w, h = _COVER
    script.add(
        DrawImage(
            "cover", x, y, w, h,
            crop_ratio=1.0, corner_radius=_FRAME_RADIUS, shadow=COVER_SHADOW,
        )
    )
    script.add(PopClip())

    script.add(StrokeRoundedRect(*_COVER, _FRAME_RADIUS, "white", _OUTLINE))
    script.add(StrokeRoundedRect(*_FRAME, _FRAME_RADIUS, "white", _OUTLINE))

    script.add(
        *metadata_block(
            map_info,
            _TEXT_X,
            (95, 160, 220, 295),
            (heebo(48), heebo(56, 700), heebo(48), heebo(40)),
            _TEXT_MAX_W,
        )
    )

    rating = star_ratings.get(chosen_difficulty)
    if rating:
        name = DIFFICULTY_NAMES.get(chosen_difficulty, chosen_difficulty)
        script.add(FillRoundedRect(*_RATING_BOX, radius=25, color=color))
        script.add(
            DrawRatingLabel(
                f"{name} {rating}", *_RATING_CENTER, heebo(48, 700),
                starred=not is_special_rating(rating),
            )
        )

    script.add(
        DottedLine(_DOTS_X, _DOTS_Y[0], _DOTS_X, _DOTS_Y[1], _DOT_SPACING, _DOT_RADIUS, color)
    )
    return script


def generate_ssrm_thumbnail(
    map_info: MapInfo,
    chosen_difficulty: str,
    star_ratings: StarRatings,
    background_ref: Optional[str] = None,
) -> str:
    """
    SSRM thumbnail as a PNG data URI.
    The cover is required; an unloadable background falls back to it.
    """
    cover = load_required(map_info.cover_url)
    background = load_optional(background_ref, role="background")
    images = {"cover": cover, "background": background if background is not None else cover}
    script = build_ssrm_script(map_info, chosen_difficulty, star_ratings)
    return render_to_data_uri(script, images, generator="ssrm_thumbnail")
