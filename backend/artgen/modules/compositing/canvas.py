# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Raster Compositor
A fixed-size RGBA surface with a clip stack and the drawing primitives
every generator is built from:

  clip_rounded_rect / save / restore   rounded clip regions
  fill_* / stroke_rounded_rect         solid shapes and gradients
  draw_image                           crop → place → pan/zoom → blur → shadow
  draw_text                            single-line text via Pillow
  draw_badge_row                       rating chips from layout_badges()

Pixels are premultiplied float32 in 0..1; every draw is source-over
through the current clip coverage. Output is straight-alpha 8-bit PNG.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import cv2
import numpy as np
from PIL import Image, ImageDraw

from artgen.core.errors import InvalidCanvasSizeError
from artgen.modules.assets.fonts import get_font, measure_text
from artgen.utils.style_utils import RGBA, ColorLike, FontSpec, parse_color
from artgen.modules.layout.badges import Badge
from artgen.utils.geometry_utils import (
    CropWindow,
    circle_mask,
    matrix_scale,
    polygon_mask,
    rect_to_rect,
    rounded_rect_mask,
    scaling,
    star_points,
    translation,
)
from artgen.utils.image_utils import png_data_uri, rgba_to_png_bytes
from artgen.utils.logger import get_logger

log = get_logger(__name__)

# Pillow anchors: horizontal + vertical
_ALIGN_ANCHOR = {"left": "l", "start": "l", "center": "m", "right": "r", "end": "r"}
_BASELINE_ANCHOR = {"alphabetic": "s", "middle": "m", "top": "a", "bottom": "d"}

# Star glyph drawn after numeric badge labels, relative to font size
_STAR_RADIUS_EM = 0.42
_STAR_GAP_EM = 0.2


@dataclass(frozen=True)
class Shadow:
    """Drop shadow: blur follows the canvas convention (sigma = blur / 2)."""
    color: ColorLike = "rgba(0, 0, 0, 0.5)"
    offset_x: float = 0.0
    offset_y: float = 0.0
    blur: float = 0.0


def _premultiply(bitmap: np.ndarray) -> np.ndarray:
    f = bitmap.astype(np.float32) / 255.0
    f[:, :, :3] *= f[:, :, 3:4]
    return f


class Canvas:
    """Raster surface of fixed pixel dimensions."""

    def __init__(self, width: int, height: int) -> None:
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise InvalidCanvasSizeError(
                f"Canvas size must be positive integers, got {width}x{height}"
            )
        self.width = int(width)
        self.height = int(height)
        self._px = np.zeros((self.height, self.width, 4), dtype=np.float32)
        self._clip: Optional[np.ndarray] = None
        self._clip_stack: list[Optional[np.ndarray]] = []

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    # ─── Clip Stack ──────────────────────────────────────────────────────────

    def save(self) -> None:
        self._clip_stack.append(self._clip)

    def restore(self) -> None:
        if not self._clip_stack:
            log.warning("canvas_restore_without_save")
            return
        self._clip = self._clip_stack.pop()

    def clip_rounded_rect(
        self, x: float, y: float, w: float, h: float, radius: float
    ) -> None:
        """Intersect the current clip with a rounded rect until restore()."""
        mask = rounded_rect_mask(self.shape, x, y, w, h, radius)
        self._clip = mask if self._clip is None else self._clip * mask

    @contextmanager
    def clipped(
        self, x: float, y: float, w: float, h: float, radius: float
    ) -> Iterator["Canvas"]:
        self.save()
        self.clip_rounded_rect(x, y, w, h, radius)
        try:
            yield self
        finally:
            self.restore()

    # ─── Compositing Core ────────────────────────────────────────────────────

    def _composite(self, layer: np.ndarray) -> None:
        """Source-over a premultiplied (H, W, 4) layer through the clip."""
        if self._clip is not None:
            layer = layer * self._clip[:, :, None]
        self._px = layer + self._px * (1.0 - layer[:, :, 3:4])

    def _fill_mask(self, mask: np.ndarray, rgba: RGBA) -> None:
        r, g, b, a = rgba
        if a <= 0.0:
            return
        premul = np.array([r * a, g * a, b * a, a], dtype=np.float32)
        self._composite(mask[:, :, None] * premul)

    def _shadow_layer(self, alpha: np.ndarray, shadow: Shadow) -> Optional[np.ndarray]:
        r, g, b, a = parse_color(shadow.color)
        if a <= 0.0:
            return None
        shifted = cv2.warpAffine(
            alpha,
            translation(shadow.offset_x, shadow.offset_y)[:2],
            (self.width, self.height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0,
        )
        if shadow.blur > 0:
            shifted = cv2.GaussianBlur(shifted, (0, 0), sigmaX=shadow.blur / 2.0)
        premul = np.array([r * a, g * a, b * a, a], dtype=np.float32)
        return shifted[:, :, None] * premul

    def _fill_shape(
        self, mask: np.ndarray, color: ColorLike, shadow: Optional[Shadow] = None
    ) -> None:
        rgba = parse_color(color)
        if shadow is not None and rgba[3] > 0:
            layer = self._shadow_layer(mask * rgba[3], shadow)
            if layer is not None:
                self._composite(layer)
        self._fill_mask(mask, rgba)

    # ─── Fills ───────────────────────────────────────────────────────────────

    def fill(self, color: ColorLike) -> None:
        self._fill_mask(np.ones(self.shape, dtype=np.float32), parse_color(color))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: ColorLike) -> None:
        self._fill_shape(rounded_rect_mask(self.shape, x, y, w, h, 0), color)

    def fill_linear_gradient(
        self,
        x0: float, y0: float, x1: float, y1: float,
        colors: Sequence[ColorLike],
    ) -> None:
        """Evenly spaced stops along (x0,y0)→(x1,y1), padded beyond the ends."""
        if not colors:
            return
        stops = [parse_color(c) for c in colors]
        if len(stops) == 1:
            self._fill_mask(np.ones(self.shape, dtype=np.float32), stops[0])
            return

        ys, xs = np.mgrid[0:self.height, 0:self.width].astype(np.float32)
        xs += 0.5
        ys += 0.5
        dx, dy = x1 - x0, y1 - y0
        denom = dx * dx + dy * dy
        if denom == 0:
            t = np.zeros(self.shape, dtype=np.float32)
        else:
            t = np.clip(((xs - x0) * dx + (ys - y0) * dy) / denom, 0.0, 1.0)

        positions = np.linspace(0.0, 1.0, len(stops))
        premul = [(r * a, g * a, b * a, a) for r, g, b, a in stops]
        layer = np.empty((self.height, self.width, 4), dtype=np.float32)
        flat_t = t.ravel()
        for ch in range(4):
            layer[:, :, ch] = np.interp(
                flat_t, positions, [p[ch] for p in premul]
            ).reshape(self.shape)
        self._composite(layer)

    def fill_rounded_rect(
        self,
        x: float, y: float, w: float, h: float,
        radius: float,
        color: ColorLike,
        shadow: Optional[Shadow] = None,
    ) -> None:
        self._fill_shape(rounded_rect_mask(self.shape, x, y, w, h, radius), color, shadow)

    def stroke_rounded_rect(
        self,
        x: float, y: float, w: float, h: float,
        radius: float,
        color: ColorLike,
        line_width: float,
    ) -> None:
        """Stroke centred on the rect outline, like a canvas stroke()."""
        half = line_width / 2.0
        outer = rounded_rect_mask(
            self.shape, x - half, y - half, w + line_width, h + line_width, radius + half
        )
        inner = rounded_rect_mask(
            self.shape, x + half, y + half, w - line_width, h - line_width,
            max(radius - half, 0.0),
        )
        self._fill_mask(np.clip(outer - inner, 0.0, 1.0), parse_color(color))

    def fill_polygon(self, points: Sequence[tuple[float, float]], color: ColorLike) -> None:
        self._fill_shape(polygon_mask(self.shape, points), color)

    def fill_circle(self, cx: float, cy: float, radius: float, color: ColorLike) -> None:
        self._fill_shape(circle_mask(self.shape, cx, cy, radius), color)

    def fill_star(self, cx: float, cy: float, radius: float, color: ColorLike) -> None:
        """Five-point star, inner radius 0.4 of outer."""
        self.fill_polygon(star_points(cx, cy, radius), color)

    # ─── Images ──────────────────────────────────────────────────────────────

    def draw_image(
        self,
        bitmap: np.ndarray,
        x: float, y: float, w: float, h: float,
        crop: Optional[CropWindow] = None,
        transform: Optional[np.ndarray] = None,
        blur: float = 0.0,
        shadow: Optional[Shadow] = None,
    ) -> None:
        """
        Draw `crop` of an RGBA bitmap scaled into (x, y, w, h), then apply
        the optional 3×3 canvas transform (pan/zoom). blur is a CSS-style
        Gaussian blur (sigma = blur px) of the placed image.
        """
        if w <= 0 or h <= 0:
            return

        src = bitmap
        if crop is not None:
            sx = int(round(crop.source_x))
            sy = int(round(crop.source_y))
            sw = max(1, int(round(crop.source_width)))
            sh = max(1, int(round(crop.source_height)))
            src = bitmap[sy:sy + sh, sx:sx + sw]
        src_h, src_w = src.shape[:2]
        if src_w == 0 or src_h == 0:
            log.warning("draw_image_empty_source", crop=str(crop))
            return

        placement = rect_to_rect((0, 0, src_w, src_h), (x, y, w, h))
        if transform is not None:
            placement = transform @ placement

        premul = _premultiply(src)
        scale = matrix_scale(placement)
        if scale < 1.0:
            # Area-average before warping to avoid aliasing on big downscales
            new_w = max(1, int(round(src_w * scale)))
            new_h = max(1, int(round(src_h * scale)))
            premul = cv2.resize(premul, (new_w, new_h), interpolation=cv2.INTER_AREA)
            placement = placement @ scaling(src_w / new_w, src_h / new_h)

        # Pixel-centre convention: OpenCV samples at integer coordinates
        sample = translation(-0.5, -0.5) @ placement @ translation(0.5, 0.5)
        layer = cv2.warpAffine(
            premul,
            sample[:2],
            (self.width, self.height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_REPLICATE,
        )

        src_h2, src_w2 = premul.shape[:2]
        corners = [
            tuple((placement @ np.array([cx, cy, 1.0]))[:2])
            for cx, cy in ((0, 0), (src_w2, 0), (src_w2, src_h2), (0, src_h2))
        ]
        layer *= polygon_mask(self.shape, corners)[:, :, None]

        if blur > 0:
            layer = cv2.GaussianBlur(layer, (0, 0), sigmaX=blur)

        if shadow is not None:
            shadow_layer = self._shadow_layer(np.ascontiguousarray(layer[:, :, 3]), shadow)
            if shadow_layer is not None:
                self._composite(shadow_layer)

        self._composite(layer)

    def draw_background_cover(
        self,
        bitmap: np.ndarray,
        crop: Optional[CropWindow],
        dest: tuple[float, float, float, float],
        blur: float = 0.0,
        dim_alpha: float = 0.0,
        transform: Optional[np.ndarray] = None,
    ) -> None:
        """Cropped window scaled to fill dest, optionally blurred and dimmed."""
        x, y, w, h = dest
        self.draw_image(bitmap, x, y, w, h, crop=crop, transform=transform, blur=blur)
        if dim_alpha > 0:
            self.fill_rect(x, y, w, h, (0, 0, 0, dim_alpha))

    def draw_shadowed_image(
        self,
        bitmap: np.ndarray,
        x: float, y: float, w: float, h: float,
        corner_radius: float,
        shadow: Optional[Shadow],
        crop: Optional[CropWindow] = None,
        transform: Optional[np.ndarray] = None,
        blur: float = 0.0,
    ) -> None:
        """Image clipped to a rounded rect; the shadow is drawn inside that clip."""
        with self.clipped(x, y, w, h, corner_radius):
            self.draw_image(
                bitmap, x, y, w, h, crop=crop, transform=transform, blur=blur, shadow=shadow
            )

    # ─── Text ────────────────────────────────────────────────────────────────

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        font: FontSpec,
        color: ColorLike = "white",
        align: str = "left",
        baseline: str = "alphabetic",
        shadow: Optional[Shadow] = None,
    ) -> None:
        """Single-line text. Callers pre-fit with truncate()/shrink_to_fit()."""
        if not text:
            return
        rgba = parse_color(color)
        face = get_font(font)
        anchor = _ALIGN_ANCHOR.get(align, "l") + _BASELINE_ANCHOR.get(baseline, "s")

        left, top, right, bottom = face.getbbox(text, anchor=anchor)
        if right <= left or bottom <= top:
            return

        pad = 2
        ox = int(math.floor(x + left)) - pad
        oy = int(math.floor(y + top)) - pad
        glyphs = Image.new("L", (int(right - left) + 2 * pad + 2, int(bottom - top) + 2 * pad + 2), 0)
        ImageDraw.Draw(glyphs).text((x - ox, y - oy), text, fill=255, font=face, anchor=anchor)

        mask = np.zeros(self.shape, dtype=np.float32)
        local = np.asarray(glyphs, dtype=np.float32) / 255.0
        gh, gw = local.shape
        dx0, dy0 = max(ox, 0), max(oy, 0)
        dx1, dy1 = min(ox + gw, self.width), min(oy + gh, self.height)
        if dx1 <= dx0 or dy1 <= dy0:
            return
        mask[dy0:dy1, dx0:dx1] = local[dy0 - oy:dy1 - oy, dx0 - ox:dx1 - ox]

        if shadow is not None and rgba[3] > 0:
            layer = self._shadow_layer(mask * rgba[3], shadow)
            if layer is not None:
                self._composite(layer)
        self._fill_mask(mask, rgba)

    def draw_rating_label(
        self,
        value: str,
        cx: float,
        cy: float,
        font: FontSpec,
        color: ColorLike = "white",
        starred: bool = True,
    ) -> None:
        """Value centred on (cx, cy), followed by a vector star when starred."""
        if not starred:
            self.draw_text(value, cx, cy, font, color, align="center", baseline="middle")
            return

        text_w = measure_text(value, font)
        star_r = font.size * _STAR_RADIUS_EM
        gap = font.size * _STAR_GAP_EM
        start = cx - (text_w + gap + 2 * star_r) / 2.0
        self.draw_text(value, start, cy, font, color, align="left", baseline="middle")
        self.fill_star(start + text_w + gap + star_r, cy, star_r, color)

    def draw_badge_row(
        self,
        badges: Sequence[Badge],
        y: float,
        height: float,
        corner_radius: float,
        font: FontSpec,
        special_font: Optional[FontSpec] = None,
        text_color: ColorLike = "white",
    ) -> None:
        """Rounded chip per badge with its label centred inside."""
        for badge in badges:
            self.fill_rounded_rect(badge.x, y, badge.width, height, corner_radius, badge.color)
            self.draw_rating_label(
                badge.value,
                badge.x + badge.width / 2.0,
                y + height / 2.0,
                (special_font or font) if badge.special else font,
                text_color,
                starred=not badge.special,
            )

    # ─── Output ──────────────────────────────────────────────────────────────

    def to_rgba8(self) -> np.ndarray:
        """Straight-alpha RGBA uint8 copy of the surface."""
        alpha = self._px[:, :, 3:4]
        safe = np.where(alpha > 0, alpha, 1.0)
        rgb = np.where(alpha > 0, self._px[:, :, :3] / safe, 0.0)
        out = np.concatenate([rgb, alpha], axis=2)
        return np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.to_rgba8()[y, x]
        return int(r), int(g), int(b), int(a)

    def to_png(self) -> bytes:
        return rgba_to_png_bytes(self.to_rgba8())

    def to_data_uri(self) -> str:
        return png_data_uri(self.to_png())
