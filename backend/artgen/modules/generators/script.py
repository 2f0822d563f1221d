# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Layout Script
Every artwork is an ordered list of draw directives over a fixed-size
canvas. Fixed-layout generators and the CardConfig interpreter both emit
a LayoutScript; render_script() is the single executor that turns it
into pixels via the Canvas primitives.

Images are referenced by name and supplied separately so a script is
pure data: the same script renders identically for identical bitmaps.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Optional, Union

import numpy as np

from artgen.models.transform import BackgroundTransform
from artgen.modules.assets.fonts import measure_text
from artgen.modules.assets.icons import load_icon
from artgen.modules.compositing.canvas import Canvas, Shadow
from artgen.modules.layout.badges import Badge
from artgen.modules.layout.text_fit import shrink_to_fit, truncate
from artgen.utils.geometry_utils import apply_transform, crop_to_aspect
from artgen.utils.logger import get_logger
from artgen.utils.style_utils import ColorLike, FontSpec

log = get_logger(__name__)

Point = tuple[float, float]


# ─── Directives ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FillColor:
    color: ColorLike


@dataclass(frozen=True)
class FillLinearGradient:
    x0: float
    y0: float
    x1: float
    y1: float
    colors: tuple[ColorLike, ...]


@dataclass(frozen=True)
class PushClip:
    x: float
    y: float
    width: float
    height: float
    radius: float


@dataclass(frozen=True)
class PopClip:
    pass


@dataclass(frozen=True)
class FillRoundedRect:
    x: float
    y: float
    width: float
    height: float
    radius: float
    color: ColorLike
    shadow: Optional[Shadow] = None


@dataclass(frozen=True)
class StrokeRoundedRect:
    x: float
    y: float
    width: float
    height: float
    radius: float
    color: ColorLike
    line_width: float


@dataclass(frozen=True)
class DrawImage:
    """
    Named image into (x, y, width, height).
    crop_ratio     centre-crop the source to this aspect first
    corner_radius  clip to a rounded rect (shadow drawn inside the clip)
    transform      pan/zoom about the canvas centre
    """
    image: str
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None
    crop_ratio: Optional[float] = None
    corner_radius: Optional[float] = None
    shadow: Optional[Shadow] = None
    blur: float = 0.0
    dim_alpha: float = 0.0
    transform: Optional[BackgroundTransform] = None


@dataclass(frozen=True)
class DrawText:
    text: str
    x: float
    y: float
    font: FontSpec
    color: ColorLike = "white"
    align: str = "left"
    baseline: str = "alphabetic"
    max_width: Optional[float] = None
    fit: Literal["truncate", "shrink"] = "truncate"
    min_size: float = 8.0
    shadow: Optional[Shadow] = None


@dataclass(frozen=True)
class DrawIcon:
    name: str
    x: float
    y: float
    size: int


@dataclass(frozen=True)
class DrawBadgeRow:
    badges: tuple[Badge, ...]
    y: float
    height: float
    radius: float
    font: FontSpec
    special_font: Optional[FontSpec] = None


@dataclass(frozen=True)
class DrawRatingLabel:
    value: str
    cx: float
    cy: float
    font: FontSpec
    color: ColorLike = "white"
    starred: bool = True


@dataclass(frozen=True)
class FillPolygon:
    points: tuple[Point, ...]
    color: ColorLike


@dataclass(frozen=True)
class DottedLine:
    """Filled dots stamped at t = i / floor(length / spacing), i = 0..count."""
    x0: float
    y0: float
    x1: float
    y1: float
    spacing: float
    radius: float
    color: ColorLike


Directive = Union[
    FillColor, FillLinearGradient, PushClip, PopClip, FillRoundedRect,
    StrokeRoundedRect, DrawImage, DrawText, DrawIcon, DrawBadgeRow,
    DrawRatingLabel, FillPolygon, DottedLine,
]


@dataclass
class LayoutScript:
    width: int
    height: int
    directives: list[Directive] = field(default_factory=list)

    def add(self, *directives: Directive) -> "LayoutScript":
        self.directives.extend(directives)
        return self

    def image_names(self) -> set[str]:
        return {d.image for d in self.directives if isinstance(d, DrawImage)}


# ─── Handlers ────────────────────────────────────────────────────────────────

Images = Mapping[str, Optional[np.ndarray]]


def _fill_color(canvas: Canvas, d: FillColor, images: Images) -> None:
    canvas.fill(d.color)


def _fill_gradient(canvas: Canvas, d: FillLinearGradient, images: Images) -> None:
    canvas.fill_linear_gradient(d.x0, d.y0, d.x1, d.y1, d.colors)


def _push_clip(canvas: Canvas, d: PushClip, images: Images) -> None:
    canvas.save()
    canvas.clip_rounded_rect(d.x, d.y, d.width, d.height, d.radius)


def _pop_clip(canvas: Canvas, d: PopClip, images: Images) -> None:
    canvas.restore()


def _fill_rounded_rect(canvas: Canvas, d: FillRoundedRect, images: Images) -> None:
    canvas.fill_rounded_rect(d.x, d.y, d.width, d.height, d.radius, d.color, shadow=d.shadow)


def _stroke_rounded_rect(canvas: Canvas, d: StrokeRoundedRect, images: Images) -> None:
    canvas.stroke_rounded_rect(d.x, d.y, d.width, d.height, d.radius, d.color, d.line_width)


def _draw_image(canvas: Canvas, d: DrawImage, images: Images) -> None:
    bitmap = images.get(d.image)
    if bitmap is None:
        log.debug("image_directive_skipped", image=d.image)
        return

    src_h, src_w = bitmap.shape[:2]
    w = d.width if d.width is not None else float(src_w)
    h = d.height if d.height is not None else float(src_h)
    crop = crop_to_aspect(src_w, src_h, d.crop_ratio) if d.crop_ratio else None
    matrix = (
        apply_transform(d.transform, canvas.width, canvas.height)
        if d.transform is not None else None
    )
    rect = (d.x, d.y, w, h)

    if d.corner_radius is not None:
        canvas.draw_shadowed_image(
            bitmap, *rect, d.corner_radius, d.shadow,
            crop=crop, transform=matrix, blur=d.blur,
        )
    elif d.shadow is not None:
        canvas.draw_image(
            bitmap, *rect, crop=crop, transform=matrix, blur=d.blur, shadow=d.shadow
        )
    else:
        canvas.draw_background_cover(bitmap, crop, rect, blur=d.blur, transform=matrix)

    if d.dim_alpha > 0:
        canvas.fill_rect(*rect, (0, 0, 0, d.dim_alpha))


def _draw_text(canvas: Canvas, d: DrawText, images: Images) -> None:
    text, font = d.text, d.font
    if d.max_width is not None:
        if d.fit == "shrink":
            size = shrink_to_fit(
                text, d.max_width, font.size, d.min_size,
                lambda t, s: measure_text(t, font.at_size(s)),
            )
            font = font.at_size(size)
        else:
            text = truncate(text, d.max_width, lambda t: measure_text(t, font))
    canvas.draw_text(
        text, d.x, d.y, font, d.color,
        align=d.align, baseline=d.baseline, shadow=d.shadow,
    )


def _draw_icon(canvas: Canvas, d: DrawIcon, images: Images) -> None:
    icon = load_icon(d.name, d.size)
    if icon is None:
        return
    canvas.draw_image(icon, d.x, d.y, d.size, d.size)


def _draw_badge_row(canvas: Canvas, d: DrawBadgeRow, images: Images) -> None:
    canvas.draw_badge_row(d.badges, d.y, d.height, d.radius, d.font, d.special_font)


def _draw_rating_label(canvas: Canvas, d: DrawRatingLabel, images: Images) -> None:
    canvas.draw_rating_label(d.value, d.cx, d.cy, d.font, d.color, starred=d.starred)


def _fill_polygon(canvas: Canvas, d: FillPolygon, images: Images) -> None:
    canvas.fill_polygon(d.points, d.color)


def _dotted_line(canvas: Canvas, d: DottedLine, images: Images) -> None:
    for cx, cy in dot_positions(d.x0, d.y0, d.x1, d.y1, d.spacing):
        canvas.fill_circle(cx, cy, d.radius, d.color)


def dot_positions(
    x0: float, y0: float, x1: float, y1: float, spacing: float
) -> list[Point]:
    dx, dy = x1 - x0, y1 - y0
    count = int(math.floor(math.hypot(dx, dy) / spacing)) if spacing > 0 else 0
    if count == 0:
        return [(x0, y0)]
    return [(x0 + dx * i / count, y0 + dy * i / count) for i in range(count + 1)]


_HANDLERS: dict[type, Callable[[Canvas, Any, Images], None]] = {
    FillColor: _fill_color,
    FillLinearGradient: _fill_gradient,
    PushClip: _push_clip,
    PopClip: _pop_clip,
    FillRoundedRect: _fill_rounded_rect,
    StrokeRoundedRect: _stroke_rounded_rect,
    DrawImage: _draw_image,
    DrawText: _draw_text,
    DrawIcon: _draw_icon,
    DrawBadgeRow: _draw_badge_row,
    DrawRatingLabel: _draw_rating_label,
    FillPolygon: _fill_polygon,
    DottedLine: _dotted_line,
}


# ─── Executor ────────────────────────────────────────────────────────────────

def render_script(script: LayoutScript, images: Optional[Images] = None) -> Canvas:
    """
    Execute every directive in order on a fresh canvas.
    Images missing from `images` (or mapped to None) are skipped.
    Raises InvalidCanvasSizeError for non-positive script dimensions.
    """
    canvas = Canvas(script.width, script.height)
    images = images or {}

    for directive in script.directives:
        handler = _HANDLERS.get(type(directive))
        if handler is None:
            log.warning("directive_skipped", directive=type(directive).__name__)
            continue
        handler(canvas, directive, images)

    return canvas

