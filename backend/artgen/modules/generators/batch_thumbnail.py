# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Batch Thumbnail (1920×1080)
16:9 crop of the background (optionally pan/zoomed), centred product
logo, and a bold month label with a soft drop shadow.
"""

from __future__ import annotations

from typing import Optional

from artgen.models.transform import BackgroundTransform
from artgen.modules.assets.icons import load_logo
from artgen.modules.compositing.canvas import Shadow
from artgen.modules.generators.common import aller, load_required, render_to_data_uri
from artgen.modules.generators.script import DrawImage, DrawText, LayoutScript

THUMB_W = 1920
THUMB_H = 1080

_LOGO = (191, 250, 1538, 262)
_MONTH_X = THUMB_W / 2
_MONTH_Y = 760
_MONTH_SHADOW = Shadow(color="black", offset_x=4, offset_y=4, blur=10)


def build_batch_thumbnail_script(
    month_label: str, transform: Optional[BackgroundTransform] = None
) -> LayoutScript:
    script = LayoutScript(THUMB_W, THUMB_H)
    script.add(
        DrawImage(
            "background", 0, 0, THUMB_W, THUMB_H,
            crop_ratio=16 / 9,
            transform=transform,
        )
    )
    x, y, w, h = _LOGO
    script.add(DrawImage("logo", x, y, w, h))
    script.add(
        DrawText(
            month_label, _MONTH_X, _MONTH_Y, aller(130),
            align="center", shadow=_MONTH_SHADOW,
        )
    )
    return script


def generate_batch_thumbnail(
    background_ref: str,
    month_label: str,
    transform: Optional[BackgroundTransform] = None,
) -> str:
    """Batch thumbnail as a PNG data URI. The logo is optional."""
    images = {"background": load_required(background_ref), "logo": load_logo()}
    script = build_batch_thumbnail_script(month_label, transform)
    return render_to_data_uri(script, images, generator="batch_thumbnail")
