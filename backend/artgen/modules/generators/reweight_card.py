# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Reweight Card (800×270)
Shadowed 230×230 cover, metadata panel, map code, and the chosen
difficulty's old → new rating as two badges joined by a trend arrow
(green increase, red decrease, gray equal or unparseable).
"""

from __future__ import annotations

from enum import Enum

from artgen.models.map_info import MapInfo, StarRatings, difficulty_css, is_special_rating
from artgen.modules.generators.common import (
    COVER_SHADOW,
    load_required,
    metadata_block,
    render_to_data_uri,
    torus,
)
from artgen.modules.generators.script import (
    DrawImage,
    DrawRatingLabel,
    DrawText,
    FillPolygon,
    FillRoundedRect,
    LayoutScript,
)
from artgen.utils.logger import get_logger

log = get_logger(__name__)

REWEIGHT_W = 800
REWEIGHT_H = 270

_COVER = (20, 20, 230, 230)
_PANEL = (270, 20, 480, 230)
_PANEL_COLOR = "rgba(0, 0, 0, 0.2)"

_TEXT_X = 290
_TEXT_MAX_W = 380
_RIGHT_X = 730

_BADGE_W = 100
_BADGE_H = 60
_BADGE_Y = 170
_OLD_BADGE_X = 360
_NEW_BADGE_X = 560
_ARROW_X = 500
_LABEL_CY = 200


class RatingTrend(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    EQUAL = "equal"

    @property
    def color(self) -> str:
        return _TREND_COLORS[self]


_TREND_COLORS = {
    RatingTrend.INCREASE: "rgb(22, 163, 74)",
    RatingTrend.DECREASE: "rgb(220, 38, 38)",
    RatingTrend.EQUAL: "gray",
}


def rating_trend(old: str, new: str) -> RatingTrend:
    """Sign of new - old; anything unparseable compares as equal."""
    try:
        old_val = float(old)
        new_val = float(new)
    except (TypeError, ValueError):
        return RatingTrend.EQUAL
    if new_val > old_val:
        return RatingTrend.INCREASE
    if new_val < old_val:
        return RatingTrend.DECREASE
    return RatingTrend.EQUAL


def arrow_points(tx: float, cy: float) -> tuple[tuple[float, float], ...]:
    """Right-pointing chevron block, 25 wide and 60 tall."""
    return (
        (tx, cy - 30),
        (tx + 10, cy - 30),
        (tx + 25, cy),
        (tx + 10, cy + 30),
        (tx, cy + 30),
    )


def build_reweight_script(
    map_info: MapInfo,
    old_star_ratings: StarRatings,
    new_star_ratings: StarRatings,
    chosen_difficulty: str,
) -> LayoutScript:
    script = LayoutScript(REWEIGHT_W, REWEIGHT_H)

    x, y, w, h = _COVER
    script.add(DrawImage("cover", x, y, w, h, corner_radius=10, shadow=COVER_SHADOW))
    script.add(FillRoundedRect(*_PANEL, radius=10, color=_PANEL_COLOR))

    script.add(
        *metadata_block(
            map_info,
            _TEXT_X,
            (55, 90, 120, 150),
            (torus(24), torus(30, 700), torus(20), torus(20)),
            _TEXT_MAX_W,
        )
    )
    script.add(DrawText("Map Code:", _RIGHT_X, 55, torus(20), align="right"))
    script.add(DrawText(map_info.id, _RIGHT_X, 75, torus(20), align="right"))

    old = old_star_ratings.get(chosen_difficulty)
    new = new_star_ratings.get(chosen_difficulty)
    if not (old and new):
        log.debug("reweight_comparison_omitted", difficulty=chosen_difficulty)
        return script

    badge_color = difficulty_css(chosen_difficulty)
    label_font = torus(20, 700)
    trend = rating_trend(old, new)

    script.add(
        FillRoundedRect(_OLD_BADGE_X, _BADGE_Y, _BADGE_W, _BADGE_H, 10, badge_color),
        DrawRatingLabel(
            old, _OLD_BADGE_X + _BADGE_W / 2, _LABEL_CY, label_font,
            starred=not is_special_rating(old),
        ),
        FillPolygon(arrow_points(_ARROW_X, _LABEL_CY), trend.color),
        FillRoundedRect(_NEW_BADGE_X, _BADGE_Y, _BADGE_W, _BADGE_H, 10, badge_color),
        DrawRatingLabel(
            new, _NEW_BADGE_X + _BADGE_W / 2, _LABEL_CY, label_font,
            starred=not is_special_rating(new),
        ),
    )
    return script


def generate_reweight_card(
    map_info: MapInfo,
    old_star_ratings: StarRatings,
    new_star_ratings: StarRatings,
    chosen_difficulty: str,
) -> str:
    """Reweight comparison card as a PNG data URI."""
    cover = load_required(map_info.cover_url)
    script = build_reweight_script(map_info, old_star_ratings, new_star_ratings, chosen_difficulty)
    return render_to_data_uri(script, {"cover": cover}, generator="reweight_card")
