# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 4 — Canvas compositing tests.
Pixel-level checks of fills, clipping, shadows, image placement,
strokes, gradients and text on small synthetic canvases.
"""

import cv2
import numpy as np
import pytest


def _close(actual, expected, tol=1):
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


def _quadrant_bitmap() -> np.ndarray:
    """2×2 RGBA: red, green / blue, white."""
    bmp = np.zeros((2, 2, 4), dtype=np.uint8)
    bmp[0, 0] = (255, 0, 0, 255)
    bmp[0, 1] = (0, 255, 0, 255)
    bmp[1, 0] = (0, 0, 255, 255)
    bmp[1, 1] = (255, 255, 255, 255)
    return bmp


# ─── Surface ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("w,h", [(0, 10), (10, -1), (10.5, 10)])
def test_invalid_canvas_size(w, h):
    from artgen.core.errors import InvalidCanvasSizeError
    from artgen.modules.compositing.canvas import Canvas

    with pytest.raises(InvalidCanvasSizeError):
        Canvas(w, h)


def test_new_canvas_is_transparent():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(8, 4)
    assert canvas.pixel(3, 2) == (0, 0, 0, 0)
    assert canvas.to_rgba8().shape == (4, 8, 4)


def test_fill_and_png_output():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(12, 6)
    canvas.fill("red")
    assert canvas.pixel(5, 5) == (255, 0, 0, 255)

    decoded = cv2.imdecode(np.frombuffer(canvas.to_png(), np.uint8), cv2.IMREAD_UNCHANGED)
    assert decoded.shape == (6, 12, 4)
    assert canvas.to_data_uri().startswith("data:image/png;base64,")


def test_translucent_fill_composites_source_over():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(4, 4)
    canvas.fill("white")
    canvas.fill("rgba(0, 0, 0, 0.5)")
    assert _close(canvas.pixel(1, 1), (128, 128, 128, 255))


# ─── Clipping ────────────────────────────────────────────────────────────────

def test_clip_limits_drawing_until_restore():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(10, 10)
    canvas.save()
    canvas.clip_rounded_rect(0, 0, 5, 10, 0)
    canvas.fill("red")
    canvas.restore()

    assert canvas.pixel(2, 5) == (255, 0, 0, 255)
    assert canvas.pixel(8, 5) == (0, 0, 0, 0)

    canvas.fill("blue")
    assert canvas.pixel(8, 5) == (0, 0, 255, 255)


def test_nested_clips_intersect():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(10, 10)
    with canvas.clipped(0, 0, 6, 10, 0):
        with canvas.clipped(4, 0, 6, 10, 0):
            canvas.fill("white")

    assert canvas.pixel(5, 5)[3] == 255
    assert canvas.pixel(2, 5)[3] == 0
    assert canvas.pixel(8, 5)[3] == 0


def test_restore_without_save_is_harmless():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(4, 4)
    canvas.restore()
    canvas.fill("red")
    assert canvas.pixel(0, 0) == (255, 0, 0, 255)


def test_rounded_corners_are_cut():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(40, 40)
    canvas.fill_rounded_rect(0, 0, 40, 40, 15, "white")
    assert canvas.pixel(0, 0)[3] == 0
    assert canvas.pixel(20, 20) == (255, 255, 255, 255)
    assert canvas.pixel(20, 0)[3] == 255


# ─── Shadows ─────────────────────────────────────────────────────────────────

def test_shape_shadow_is_offset():
    from artgen.modules.compositing.canvas import Canvas, Shadow

    canvas = Canvas(60, 60)
    canvas.fill_rounded_rect(
        20, 20, 20, 20, 0, "white", shadow=Shadow("black", offset_x=10, offset_y=10)
    )
    assert canvas.pixel(30, 30) == (255, 255, 255, 255)
    assert canvas.pixel(45, 45) == (0, 0, 0, 255)
    assert canvas.pixel(10, 10) == (0, 0, 0, 0)


def test_blurred_shadow_fades():
    from artgen.modules.compositing.canvas import Canvas, Shadow

    canvas = Canvas(80, 80)
    canvas.fill_rounded_rect(
        20, 20, 20, 20, 0, "white", shadow=Shadow("black", offset_x=15, offset_y=15, blur=10)
    )
    inner = canvas.pixel(50, 50)[3]
    edge = canvas.pixel(56, 56)[3]
    assert 0 < edge < inner


def test_image_shadow_stays_inside_rounded_clip():
    from artgen.modules.compositing.canvas import Canvas, Shadow

    bitmap = np.full((10, 10, 4), (255, 0, 0, 255), dtype=np.uint8)
    canvas = Canvas(50, 50)
    canvas.draw_shadowed_image(
        bitmap, 10, 10, 20, 20, 0, Shadow("black", offset_x=5, offset_y=5)
    )
    assert canvas.pixel(20, 20) == (255, 0, 0, 255)
    # Offset shadow region outside the image rect is clipped away
    assert canvas.pixel(33, 33) == (0, 0, 0, 0)


# ─── Images ──────────────────────────────────────────────────────────────────

def test_draw_image_scales_into_rect():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(20, 20)
    canvas.draw_image(_quadrant_bitmap(), 0, 0, 20, 20)

    assert _close(canvas.pixel(2, 2), (255, 0, 0, 255))
    assert _close(canvas.pixel(17, 2), (0, 255, 0, 255))
    assert _close(canvas.pixel(2, 17), (0, 0, 255, 255))
    assert _close(canvas.pixel(17, 17), (255, 255, 255, 255))


def test_draw_image_respects_crop_window():
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.geometry_utils import crop_to_aspect

    # 4×2 source: columns red, red, blue, blue; square crop keeps columns 1..2
    bmp = np.zeros((2, 4, 4), dtype=np.uint8)
    bmp[:, :2] = (255, 0, 0, 255)
    bmp[:, 2:] = (0, 0, 255, 255)

    canvas = Canvas(20, 20)
    canvas.draw_image(bmp, 0, 0, 20, 20, crop=crop_to_aspect(4, 2, 1.0))
    assert _close(canvas.pixel(2, 10), (255, 0, 0, 255))
    assert _close(canvas.pixel(17, 10), (0, 0, 255, 255))


def _centre_square_bitmap() -> np.ndarray:
    """20×20 blue with a red 4×4 square at columns/rows 8..11."""
    bmp = np.zeros((20, 20, 4), dtype=np.uint8)
    bmp[:] = (0, 0, 255, 255)
    bmp[8:12, 8:12] = (255, 0, 0, 255)
    return bmp


def test_zoom_transform_magnifies_about_centre():
    from artgen.models.transform import BackgroundTransform
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.geometry_utils import apply_transform

    plain = Canvas(20, 20)
    plain.draw_image(_centre_square_bitmap(), 0, 0, 20, 20)
    assert _close(plain.pixel(7, 10), (0, 0, 255, 255))

    zoomed = Canvas(20, 20)
    matrix = apply_transform(BackgroundTransform(scale=2.0), 20, 20)
    zoomed.draw_image(_centre_square_bitmap(), 0, 0, 20, 20, transform=matrix)

    # Red square now spans 6..14
    assert _close(zoomed.pixel(7, 10), (255, 0, 0, 255))
    assert _close(zoomed.pixel(4, 10), (0, 0, 255, 255))


def test_pan_transform_shifts_in_output_pixels():
    from artgen.models.transform import BackgroundTransform
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.geometry_utils import apply_transform

    canvas = Canvas(20, 20)
    matrix = apply_transform(BackgroundTransform(x=5), 20, 20)
    canvas.draw_image(_centre_square_bitmap(), 0, 0, 20, 20, transform=matrix)

    assert _close(canvas.pixel(14, 10), (255, 0, 0, 255))
    assert _close(canvas.pixel(9, 10), (0, 0, 255, 255))


def test_background_cover_dims():
    from artgen.modules.compositing.canvas import Canvas

    bitmap = np.full((4, 4, 4), 255, dtype=np.uint8)
    canvas = Canvas(10, 10)
    canvas.draw_background_cover(bitmap, None, (0, 0, 10, 10), dim_alpha=0.5)
    assert _close(canvas.pixel(5, 5), (128, 128, 128, 255))


# ─── Strokes, Gradients, Polygons ────────────────────────────────────────────

def test_stroke_leaves_interior_empty():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(60, 60)
    canvas.stroke_rounded_rect(10, 10, 40, 40, 0, "white", 4)
    assert canvas.pixel(10, 30)[3] == 255
    assert canvas.pixel(30, 30)[3] == 0
    assert canvas.pixel(3, 30)[3] == 0


def test_linear_gradient_interpolates():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(100, 4)
    canvas.fill_linear_gradient(0, 0, 100, 0, ["black", "white"])

    assert canvas.pixel(0, 1)[0] < 5
    assert canvas.pixel(99, 1)[0] > 250
    assert abs(canvas.pixel(50, 1)[0] - 128) <= 3
    assert canvas.pixel(50, 1)[3] == 255


def test_fill_polygon_and_circle():
    from artgen.modules.compositing.canvas import Canvas

    canvas = Canvas(40, 40)
    canvas.fill_polygon([(0, 0), (20, 0), (0, 20)], "red")
    canvas.fill_circle(30, 30, 5, "blue")

    assert canvas.pixel(3, 3) == (255, 0, 0, 255)
    assert canvas.pixel(18, 18)[3] == 0
    assert canvas.pixel(30, 30) == (0, 0, 255, 255)
    assert canvas.pixel(38, 38)[3] == 0


# ─── Text ────────────────────────────────────────────────────────────────────

def _ink_columns(canvas) -> np.ndarray:
    return np.nonzero(canvas.to_rgba8()[:, :, 3].max(axis=0))[0]


def test_draw_text_right_alignment():
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.style_utils import FontSpec

    canvas = Canvas(200, 60)
    canvas.draw_text("Mapper", 190, 40, FontSpec(("sans-serif",), 24), "white", align="right")

    cols = _ink_columns(canvas)
    assert cols.size > 0
    assert cols.max() <= 192
    assert cols.min() > 60


def test_draw_text_empty_is_noop():
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.style_utils import FontSpec

    canvas = Canvas(20, 20)
    canvas.draw_text("", 0, 10, FontSpec(("sans-serif",), 12))
    assert canvas.to_rgba8()[:, :, 3].max() == 0


def test_starred_rating_label_draws_more_ink():
    from artgen.modules.compositing.canvas import Canvas
    from artgen.utils.style_utils import FontSpec

    font = FontSpec(("sans-serif",), 20, weight=700)
    plain = Canvas(120, 50)
    plain.draw_rating_label("7", 60, 25, font, starred=False)
    starred = Canvas(120, 50)
    starred.draw_rating_label("7", 60, 25, font, starred=True)

    assert starred.to_rgba8()[:, :, 3].sum() > plain.to_rgba8()[:, :, 3].sum()


def test_badge_row_paints_chip_color():
    from artgen.modules.compositing.canvas import Canvas
    from artgen.modules.layout.badges import Badge
    from artgen.utils.style_utils import FontSpec

    canvas = Canvas(200, 70)
    badge = Badge(key="ES", x=10, width=100, value="4", color="rgb(22, 163, 74)", special=False)
    canvas.draw_badge_row([badge], 10, 50, 10, FontSpec(("sans-serif",), 20, weight=700))

    assert canvas.pixel(13, 35) == (22, 163, 74, 255)
    assert canvas.pixel(150, 35)[3] == 0
