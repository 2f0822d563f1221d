# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 5 — Fixed-layout generators.
Map card, reweight card, batch / playlist / SSRM thumbnails and the
layout-script executor they share. Covers are synthetic data URIs;
missing bundled fonts and logo exercise the fallback paths.
"""

import base64

import cv2
import numpy as np
import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _data_uri(rgb=(200, 30, 30), w=64, h=64) -> str:
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:] = rgb[::-1]
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode()


def _decode(uri: str) -> np.ndarray:
    """PNG data URI → RGBA uint8 array."""
    assert uri.startswith("data:image/png;base64,")
    raw = base64.b64decode(uri.partition(",")[2])
    bgra = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_UNCHANGED)
    return cv2.cvtColor(bgra, cv2.COLOR_BGRA2RGBA)


def _map_info(cover: str = None, map_id: str = "3a9f1"):
    from artgen.models.map_info import MapInfo

    return MapInfo.model_validate({
        "id": map_id,
        "metadata": {
            "songName": "Night Drive",
            "songSubName": "Extended Mix",
            "songAuthorName": "Synth Artist",
            "levelAuthorName": "Mapper",
            "duration": 185,
            "bpm": 128.0,
        },
        "versions": [{"coverURL": cover or _data_uri(), "hash": "ABCDEF0123"}],
    })


# ─── Map Card ────────────────────────────────────────────────────────────────

def test_card_dimensions_and_rounded_corners():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_card

    img = _decode(generate_card(_map_info(), StarRatings(NOR="5", EX="8.5")))

    assert img.shape == (300, 900, 4)
    assert img[0, 0, 3] == 0
    # Cover interior
    assert tuple(img[150, 150]) == (200, 30, 30, 255)


def test_card_is_deterministic():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_card

    ratings = StarRatings(ES="Qualified", HARD="7.25")
    assert generate_card(_map_info(), ratings, True) == generate_card(_map_info(), ratings, True)


def test_reweight_card_is_deterministic():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_reweight_card

    args = (_map_info(), StarRatings(EX="8.5"), StarRatings(EX="9.25"), "EX")
    assert generate_reweight_card(*args) == generate_reweight_card(*args)


def test_thumbnails_are_deterministic():
    from artgen.models.map_info import StarRatings
    from artgen.models.transform import BackgroundTransform
    from artgen.modules.generators import (
        generate_batch_thumbnail,
        generate_playlist_thumbnail,
        generate_ssrm_thumbnail,
    )

    bg = _data_uri((40, 90, 160), 160, 90)
    transform = BackgroundTransform(x=25, y=-10, scale=1.3)

    assert generate_batch_thumbnail(bg, "May 2026", transform) == (
        generate_batch_thumbnail(bg, "May 2026", transform)
    )
    assert generate_playlist_thumbnail(bg, "May 2026", transform) == (
        generate_playlist_thumbnail(bg, "May 2026", transform)
    )
    ratings = StarRatings(HARD="6.4")
    assert generate_ssrm_thumbnail(_map_info(), "HARD", ratings, bg) == (
        generate_ssrm_thumbnail(_map_info(), "HARD", ratings, bg)
    )


def test_card_badges_skip_missing_difficulties():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators.card import build_card_script
    from artgen.modules.generators.script import DrawBadgeRow

    ratings = StarRatings(NOR="4", HARD="6", EX="8", EXP="Unranked")
    script = build_card_script(_map_info(), ratings, use_background=False)
    rows = [d for d in script.directives if isinstance(d, DrawBadgeRow)]

    assert len(rows) == 1
    badges = rows[0].badges
    assert [b.key for b in badges] == ["NOR", "HARD", "EX", "EXP"]
    assert [b.x for b in badges] == [300, 418, 536, 654]
    assert badges[-1].special and badges[-1].width == 120


def test_card_background_only_when_requested():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators.card import build_card_script
    from artgen.modules.generators.script import DrawImage

    plain = build_card_script(_map_info(), StarRatings(), use_background=False)
    with_bg = build_card_script(_map_info(), StarRatings(), use_background=True)

    plain_images = [d for d in plain.directives if isinstance(d, DrawImage)]
    bg_images = [d for d in with_bg.directives if isinstance(d, DrawImage)]
    assert len(plain_images) == 1
    assert len(bg_images) == 2
    assert bg_images[0].blur == 10
    assert bg_images[0].width == 900


def test_card_unreachable_cover_raises():
    from artgen.core.errors import AssetFetchError
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_card

    with pytest.raises(AssetFetchError):
        generate_card(_map_info(cover="missing/cover.png"), StarRatings())


# ─── Reweight Card ───────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "old,new,expected",
    [("5", "7", "increase"), ("7.5", "5", "decrease"), ("6", "6.0", "equal"),
     ("Qualified", "7", "equal")],
)
def test_rating_trend(old, new, expected):
    from artgen.modules.generators import rating_trend
    assert rating_trend(old, new).value == expected


@pytest.mark.parametrize(
    "old,new,rgb",
    [("5", "7", (22, 163, 74)), ("9", "8", (220, 38, 38)), ("6", "6", (128, 128, 128))],
)
def test_reweight_arrow_color_follows_trend(old, new, rgb):
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_reweight_card

    img = _decode(
        generate_reweight_card(
            _map_info(), StarRatings(HARD=old), StarRatings(HARD=new), "HARD"
        )
    )
    assert img.shape == (270, 800, 4)
    assert tuple(img[200, 505]) == rgb + (255,)


def test_reweight_comparison_needs_both_ratings():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators.reweight_card import build_reweight_script
    from artgen.modules.generators.script import DrawRatingLabel, FillPolygon

    script = build_reweight_script(_map_info(), StarRatings(), StarRatings(EX="9"), "EX")
    kinds = {type(d) for d in script.directives}
    assert FillPolygon not in kinds
    assert DrawRatingLabel not in kinds


def test_reweight_special_values_are_unstarred():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators.reweight_card import build_reweight_script
    from artgen.modules.generators.script import DrawRatingLabel

    script = build_reweight_script(
        _map_info(), StarRatings(EX="Qualified"), StarRatings(EX="9.1"), "EX"
    )
    labels = [d for d in script.directives if isinstance(d, DrawRatingLabel)]
    assert [(l.value, l.starred) for l in labels] == [("Qualified", False), ("9.1", True)]


def test_arrow_points():
    from artgen.modules.generators.reweight_card import arrow_points

    assert arrow_points(500, 200) == (
        (500, 170), (510, 170), (525, 200), (510, 230), (500, 230)
    )


# ─── Thumbnails ──────────────────────────────────────────────────────────────

def test_batch_thumbnail_without_logo():
    from artgen.modules.generators import generate_batch_thumbnail

    img = _decode(generate_batch_thumbnail(_data_uri((10, 120, 200), 160, 90), "March 2026"))
    assert img.shape == (1080, 1920, 4)
    assert tuple(img[5, 5]) == (10, 120, 200, 255)


def test_batch_thumbnail_transform_moves_background():
    from artgen.models.transform import BackgroundTransform
    from artgen.modules.generators import generate_batch_thumbnail

    # Left half black, right half white
    img = np.zeros((90, 160, 3), dtype=np.uint8)
    img[:, 80:] = 255
    ok, buf = cv2.imencode(".png", img)
    uri = "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode()

    plain = _decode(generate_batch_thumbnail(uri, ""))
    panned = _decode(generate_batch_thumbnail(uri, "", BackgroundTransform(x=-400)))

    # Seam at x=960; panning left by 400 moves it to 560
    assert plain[540, 800, 0] < 5
    assert panned[540, 800, 0] > 250


def test_playlist_thumbnail_dimensions():
    from artgen.modules.generators import generate_playlist_thumbnail

    img = _decode(generate_playlist_thumbnail(_data_uri(w=300, h=200), "September 2026"))
    assert img.shape == (512, 512, 4)
    assert img[0, 0, 3] == 255


def test_playlist_month_label_shrinks_to_fit():
    from artgen.modules.generators.playlist_thumbnail import build_playlist_thumbnail_script
    from artgen.modules.generators.script import DrawText

    script = build_playlist_thumbnail_script("A very very long month label for a playlist")
    texts = [d for d in script.directives if isinstance(d, DrawText)]
    assert texts[0].fit == "shrink"
    assert texts[0].max_width == 450
    assert texts[0].align == "center"


def test_ssrm_thumbnail_dimensions_and_frame():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_ssrm_thumbnail

    img = _decode(generate_ssrm_thumbnail(_map_info(), "EX", StarRatings(EX="10.5")))
    assert img.shape == (1080, 1920, 4)
    # Gradient margin outside the frame is opaque
    assert img[5, 5, 3] == 255
    # Frame outline
    assert tuple(img[540, 20, :3]) == (255, 255, 255)


def test_ssrm_background_falls_back_to_cover():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators import generate_ssrm_thumbnail

    m = _map_info()
    ratings = StarRatings(EX="10.5")
    fallback = generate_ssrm_thumbnail(m, "EX", ratings, background_ref="missing/bg.png")
    explicit = generate_ssrm_thumbnail(m, "EX", ratings, background_ref=m.cover_url)
    assert fallback == explicit


def test_ssrm_rating_box_only_with_rating():
    from artgen.models.map_info import StarRatings
    from artgen.modules.generators.script import DrawRatingLabel, DottedLine
    from artgen.modules.generators.ssrm_thumbnail import build_ssrm_script

    without = build_ssrm_script(_map_info(), "EX", StarRatings(NOR="4"))
    assert not any(isinstance(d, DrawRatingLabel) for d in without.directives)

    with_rating = build_ssrm_script(_map_info(), "EX", StarRatings(EX="Unranked"))
    labels = [d for d in with_rating.directives if isinstance(d, DrawRatingLabel)]
    assert labels[0].value == "Expert Unranked"
    assert labels[0].starred is False

    dots = [d for d in with_rating.directives if isinstance(d, DottedLine)]
    assert dots[0].color == "rgb(220, 38, 38)"


def test_dot_positions_cover_segment_ends():
    from artgen.modules.generators.script import dot_positions

    dots = dot_positions(640, 50, 640, 1030, 60)
    assert len(dots) == 17
    assert dots[0] == (640, 50)
    assert dots[-1] == (640, 1030)
    assert dot_positions(0, 0, 10, 0, 60) == [(0, 0)]


# ─── Layout Script Executor ──────────────────────────────────────────────────

def test_render_script_skips_missing_images():
    from artgen.modules.generators.script import (
        DrawImage, FillColor, LayoutScript, render_script,
    )

    script = LayoutScript(10, 10).add(FillColor("red"), DrawImage("absent", 0, 0, 10, 10))
    canvas = render_script(script, {"absent": None})
    assert canvas.pixel(5, 5) == (255, 0, 0, 255)


def test_render_script_balances_clip_directives():
    from artgen.modules.generators.script import (
        FillColor, LayoutScript, PopClip, PushClip, render_script,
    )

    script = LayoutScript(10, 10).add(
        PushClip(0, 0, 5, 10, 0), FillColor("red"), PopClip(), FillColor("rgba(0, 0, 255, 0.5)")
    )
    canvas = render_script(script)
    left, right = canvas.pixel(2, 5), canvas.pixel(8, 5)
    assert left[3] == 255 and left[0] > 100
    assert right[2] == 255 and right[3] == 128


def test_render_script_rejects_bad_size():
    from artgen.core.errors import InvalidCanvasSizeError
    from artgen.modules.generators.script import LayoutScript, render_script

    with pytest.raises(InvalidCanvasSizeError):
        render_script(LayoutScript(0, 10))
