# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Map Card (900×300)

  ┌────────────────────────────────────────────────────────────┐
  │ ┌────────┐  ┌─────────────────────────────────────────┐    │
  │ │ cover  │  │ author                       id    [key]│    │
  │ │260×260 │  │ SONG                         bpm   [met]│    │
  │ │        │  │ subname                      m:ss  [clk]│    │
  │ │        │  │ Mapped by X                             │    │
  │ │        │  └─────────────────────────────────────────┘    │
  │ └────────┘  [ES ★][NOR ★][HARD ★][EX ★][EXP ★]             │
  └────────────────────────────────────────────────────────────┘

Optional background: cover-fill blurred 10px with a 40% black dim.
"""

from __future__ import annotations

from artgen.models.map_info import MapInfo, StarRatings, format_duration
from artgen.modules.generators.common import (
    COVER_SHADOW,
    load_required,
    metadata_block,
    render_to_data_uri,
    torus,
)
from artgen.modules.generators.script import (
    DrawBadgeRow,
    DrawIcon,
    DrawImage,
    DrawText,
    FillRoundedRect,
    LayoutScript,
    PushClip,
)
from artgen.modules.layout.badges import layout_badges, rating_triples

CARD_W = 900
CARD_H = 300
_CARD_RADIUS = 20

_BG_BLUR = 10
_BG_DIM = 102 / 255

_COVER = (20, 20, 260, 260)
_PANEL = (300, 20, 580, 180)
_PANEL_COLOR = "rgba(0, 0, 0, 0.2)"

_TEXT_X = 320
_TEXT_MAX_W = 380

_RIGHT_X = 830
_ICON_X = 840
_ICON_SIZE = 24

_BADGE_Y = 220
_BADGE_H = 50
_BADGE_RADIUS = 10
_BADGE_START_X = 300
_BADGE_W = 107
_BADGE_SPACING = 118
_SPECIAL_BADGE_W = 120
_SPECIAL_BADGE_SPACING = 130


def build_card_script(
    map_info: MapInfo, star_ratings: StarRatings, use_background: bool
) -> LayoutScript:
    script = LayoutScript(CARD_W, CARD_H)
    script.add(PushClip(0, 0, CARD_W, CARD_H, _CARD_RADIUS))

    if use_background:
        script.add(
            DrawImage(
                "cover", 0, 0, CARD_W, CARD_H,
                crop_ratio=CARD_W / CARD_H,
                blur=_BG_BLUR,
                dim_alpha=_BG_DIM,
            )
        )

    x, y, w, h = _COVER
    script.add(DrawImage("cover", x, y, w, h, corner_radius=10, shadow=COVER_SHADOW))
    script.add(FillRoundedRect(*_PANEL, radius=10, color=_PANEL_COLOR))

    script.add(
        *metadata_block(
            map_info,
            _TEXT_X,
            (55, 90, 125, 180),
            (torus(24, 400), torus(30, 800), torus(20, 500), torus(20, 600)),
            _TEXT_MAX_W,
        )
    )

    meta = map_info.metadata
    rows = (
        (map_info.id, 55, "key"),
        (f"{meta.bpm:.0f}", 85, "metronome"),
        (format_duration(meta.duration), 115, "clock"),
    )
    for text, baseline_y, icon in rows:
        script.add(DrawText(text, _RIGHT_X, baseline_y, torus(24), align="right"))
        script.add(DrawIcon(icon, _ICON_X, baseline_y - 21, _ICON_SIZE))

    badges = layout_badges(
        rating_triples(star_ratings),
        default_width=_BADGE_W,
        special_width=_SPECIAL_BADGE_W,
        default_spacing=_BADGE_SPACING,
        special_spacing=_SPECIAL_BADGE_SPACING,
        start_x=_BADGE_START_X,
    )
    script.add(
        DrawBadgeRow(
            tuple(badges), _BADGE_Y, _BADGE_H, _BADGE_RADIUS,
            font=torus(28, 700),
            special_font=torus(20, 700),
        )
    )
    return script


def generate_card(
    map_info: MapInfo, star_ratings: StarRatings, use_background: bool = False
) -> str:
    """Map card as a PNG data URI. Raises AssetError if the cover cannot load."""
    cover = load_required(map_info.cover_url)
    script = build_card_script(map_info, star_ratings, use_background)
    return render_to_data_uri(script, {"cover": cover}, generator="card")
