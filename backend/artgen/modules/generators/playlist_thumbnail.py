# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Playlist Thumbnail (512×512)
Square-cropped, pan/zoomed background, the logo at 0.3 scale and a
month label shrunk to fit a 450px budget.
"""

from __future__ import annotations

from typing import Optional

from artgen.models.transform import BackgroundTransform
from artgen.modules.assets.icons import load_logo
from artgen.modules.compositing.canvas import Shadow
from artgen.modules.generators.common import aller, load_required, render_to_data_uri
from artgen.modules.generators.script import DrawImage, DrawText, LayoutScript

PLAYLIST_SIZE = 512

_LOGO_SCALE = 0.3
_LOGO_W = 1538 * _LOGO_SCALE
_LOGO_H = 262 * _LOGO_SCALE
_LOGO_Y = 50

_MONTH_Y = 460
_MONTH_MAX_W = 450
_MONTH_START_SIZE = 54
_MONTH_MIN_SIZE = 16
_MONTH_SHADOW = Shadow(color="black", offset_x=2, offset_y=2, blur=5)


def build_playlist_thumbnail_script(
    month_label: str, transform: Optional[BackgroundTransform] = None
) -> LayoutScript:
    script = LayoutScript(PLAYLIST_SIZE, PLAYLIST_SIZE)
    script.add(
        DrawImage(
            "background", 0, 0, PLAYLIST_SIZE, PLAYLIST_SIZE,
            crop_ratio=1.0,
            transform=transform,
        )
    )
    script.add(
        DrawImage("logo", (PLAYLIST_SIZE - _LOGO_W) / 2, _LOGO_Y, _LOGO_W, _LOGO_H)
    )
    script.add(
        DrawText(
            month_label, PLAYLIST_SIZE / 2, _MONTH_Y, aller(_MONTH_START_SIZE),
            align="center",
            max_width=_MONTH_MAX_W,
            fit="shrink",
            min_size=_MONTH_MIN_SIZE,
            shadow=_MONTH_SHADOW,
        )
    )
    return script


def generate_playlist_thumbnail(
    background_ref: str,
    month_label: str,
    transform: Optional[BackgroundTransform] = None,
) -> str:
    """Playlist thumbnail as a PNG data URI."""
    images = {"background": load_required(background_ref), "logo": load_logo()}
    script = build_playlist_thumbnail_script(month_label, transform)
    return render_to_data_uri(script, images, generator="playlist_thumbnail")
