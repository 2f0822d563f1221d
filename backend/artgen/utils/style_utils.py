# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — CSS Color and Font Parsing
Turns the CSS strings used by layouts and CardConfig documents into
straight-alpha RGBA floats and FontSpec values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Union

from PIL import ImageColor

from artgen.utils.logger import get_logger

log = get_logger(__name__)

RGBA = tuple[float, float, float, float]
ColorLike = Union[str, tuple]

TRANSPARENT: RGBA = (0.0, 0.0, 0.0, 0.0)

_RGB_FUNC = re.compile(
    r"^rgba?\(\s*([\d.]+%?)[\s,]+([\d.]+%?)[\s,]+([\d.]+%?)"
    r"(?:\s*[,/]\s*([\d.]+%?))?\s*\)$",
    re.IGNORECASE,
)


def _channel(token: str) -> float:
    if token.endswith("%"):
        return min(max(float(token[:-1]) * 2.55, 0.0), 255.0)
    return min(max(float(token), 0.0), 255.0)


def _alpha(token: str) -> float:
    if token.endswith("%"):
        return min(max(float(token[:-1]) / 100.0, 0.0), 1.0)
    return min(max(float(token), 0.0), 1.0)


def parse_color(value: ColorLike) -> RGBA:
    """
    Parse a CSS color (or an (r, g, b[, a]) tuple of 0-255 ints) to
    straight RGBA floats in 0..1.
    Raises ValueError on unparseable input.
    """
    if isinstance(value, tuple):
        if len(value) == 3:
            r, g, b = value
            a = 1.0
        elif len(value) == 4:
            r, g, b, a = value
        else:
            raise ValueError(f"Color tuple must have 3 or 4 items: {value!r}")
        return (r / 255.0, g / 255.0, b / 255.0, float(a))

    text = value.strip()
    if text.lower() == "transparent":
        return TRANSPARENT

    m = _RGB_FUNC.match(text)
    if m:
        r, g, b = (_channel(t) for t in m.group(1, 2, 3))
        a = _alpha(m.group(4)) if m.group(4) else 1.0
        return (r / 255.0, g / 255.0, b / 255.0, a)

    rgb = ImageColor.getrgb(text)
    if len(rgb) == 4:
        return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0, rgb[3] / 255.0)
    return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0, 1.0)


def parse_color_or(value: ColorLike, fallback: ColorLike) -> RGBA:
    """Lenient variant for document-supplied colors: logs and falls back."""
    try:
        return parse_color(value)
    except ValueError:
        log.warning("color_parse_failed", value=str(value), fallback=str(fallback))
        return parse_color(fallback)


# ─── Fonts ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FontSpec:
    """A requested face: ordered family preferences, pixel size, weight 100-900."""
    families: tuple[str, ...]
    size: float
    weight: int = 400
    italic: bool = False

    def at_size(self, size: float) -> "FontSpec":
        return replace(self, size=size)


_WEIGHT_KEYWORDS = {
    "normal": 400,
    "bold": 700,
    "bolder": 800,
    "lighter": 300,
}

_FONT_SIZE = re.compile(r"^([\d.]+)px$", re.IGNORECASE)


def parse_font(value: str, default_size: float = 10.0) -> FontSpec:
    """
    Parse CSS font shorthand: "[italic] [bold|100..900] <N>px family[, fallback]".
    Unrecognised leading tokens (small-caps, condensed) are ignored.
    """
    tokens = value.strip().split()
    italic = False
    weight = 400
    size = default_size
    family_start = len(tokens)

    for i, tok in enumerate(tokens):
        low = tok.lower()
        m = _FONT_SIZE.match(low.split("/")[0])
        if m:
            try:
                size = float(m.group(1))
            except ValueError:
                size = 0.0
            if size <= 0:
                log.warning("font_parse_failed", value=value, fallback_size=default_size)
                size = default_size
            family_start = i + 1
            break
        if low in ("italic", "oblique"):
            italic = True
        elif low in _WEIGHT_KEYWORDS:
            weight = _WEIGHT_KEYWORDS[low]
        elif low.isdigit():
            weight = int(low)

    family_text = " ".join(tokens[family_start:])
    families = tuple(
        f.strip().strip("'\"") for f in family_text.split(",") if f.strip()
    ) or ("sans-serif",)

    return FontSpec(families=families, size=size, weight=weight, italic=italic)


def rgba_to_css(rgba: RGBA) -> str:
    """Inverse of parse_color for straight 0..1 floats."""
    r, g, b, a = rgba
    return f"rgba({round(r * 255)}, {round(g * 255)}, {round(b * 255)}, {a:g})"
