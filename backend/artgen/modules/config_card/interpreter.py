# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — CardConfig Interpreter
Compiles a validated CardConfig plus a data payload into a LayoutScript
and its named images, then renders it through the shared executor.

  validate_config()       dict | CardConfig → CardConfig (InvalidSchemaError)
  compile_card_config()   → (LayoutScript, images)
  render_card_config()    → Canvas
  generate_card_from_config() → PNG data URI

Validation happens before any image is fetched or pixel drawn.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from artgen.core.errors import InvalidSchemaError
from artgen.models.card_config import (
    CardConfig,
    ColorBackground,
    CoverBackground,
    GradientBackground,
    ImageComponent,
    RoundedRectComponent,
    ShadowSpec,
    StarRatingComponent,
    TextComponent,
)
from artgen.models.map_info import StarRatings, format_duration
from artgen.modules.compositing.canvas import Canvas, Shadow
from artgen.utils.style_utils import parse_color_or, parse_font, rgba_to_css
from artgen.modules.config_card.resolver import (
    resolve_path,
    resolve_token,
    stringify,
    substitute_tokens,
)
from artgen.modules.generators.common import load_optional, load_required, render_to_data_uri
from artgen.modules.generators.script import (
    DrawBadgeRow,
    DrawImage,
    DrawText,
    FillColor,
    FillLinearGradient,
    FillRoundedRect,
    LayoutScript,
    PushClip,
    render_script,
)
from artgen.modules.layout.badges import layout_badges
from artgen.utils.logger import get_logger

log = get_logger(__name__)

ConfigInput = Union[CardConfig, Mapping[str, Any]]

DEFAULT_TEXT_FONT = "24px sans-serif"
DEFAULT_TEXT_COLOR = "black"
DEFAULT_RATING_FONT = "bold 20px sans-serif"
DEFAULT_CLIP_RADIUS = 10.0
RATING_HEIGHT = 50.0
RATING_RADIUS = 10.0

_ALIGN = {"start": "left", "end": "right"}


# ─── Validation / Data ───────────────────────────────────────────────────────

def validate_config(config: ConfigInput) -> CardConfig:
    """Accept a model or its camelCase JSON dict; raise InvalidSchemaError otherwise."""
    if isinstance(config, CardConfig):
        return config
    try:
        return CardConfig.model_validate(config)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        log.warning("card_config_invalid", error_count=len(errors))
        raise InvalidSchemaError(
            f"Invalid card config: {len(errors)} validation error(s)", errors=errors
        ) from exc


def augment_data(
    data: Optional[Mapping[str, Any]],
    star_ratings: Optional[StarRatings] = None,
    use_background: bool = False,
) -> dict[str, Any]:
    """Shallow copy of `data` with starRatings / useBackground / durationFormatted."""
    doc = dict(data or {})
    doc["starRatings"] = star_ratings.model_dump() if star_ratings is not None else None
    doc["useBackground"] = use_background
    duration = resolve_path(doc, "metadata.duration")
    if duration:
        try:
            doc["durationFormatted"] = format_duration(int(duration))
        except (TypeError, ValueError):
            log.debug("duration_not_numeric", duration=str(duration))
    return doc


def _color(value: Optional[str], fallback: str) -> str:
    if not value:
        return fallback
    return rgba_to_css(parse_color_or(value, fallback))


def _shadow(spec: Optional[ShadowSpec]) -> Optional[Shadow]:
    if spec is None:
        return None
    return Shadow(
        color=_color(spec.color, "rgba(0, 0, 0, 0.5)"),
        offset_x=spec.offset_x,
        offset_y=spec.offset_y,
        blur=spec.blur,
    )


def gradient_endpoints(
    angle: float, width: float, height: float
) -> tuple[float, float, float, float]:
    """CSS linear-gradient line for `angle` degrees (0 = upward, 90 = rightward)."""
    rad = math.radians(angle)
    dx, dy = math.sin(rad), -math.cos(rad)
    half = (abs(width * dx) + abs(height * dy)) / 2.0
    cx, cy = width / 2.0, height / 2.0
    return cx - dx * half, cy - dy * half, cx + dx * half, cy + dy * half


# ─── Compilation ─────────────────────────────────────────────────────────────

def _compile_background(
    config: CardConfig, doc: Mapping[str, Any], script: LayoutScript, images: dict
) -> None:
    bg = config.background
    use_background = bool(doc.get("useBackground"))

    if isinstance(bg, CoverBackground):
        src = stringify(resolve_path(doc, bg.src_field)) if bg.src_field else ""
        if use_background and src:
            images["background"] = load_required(src)
            script.add(
                DrawImage("background", 0, 0, config.width, config.height, blur=bg.blur)
            )
        else:
            log.debug("cover_background_skipped", use_background=use_background)
    elif isinstance(bg, GradientBackground):
        colors = tuple(_color(c, "transparent") for c in bg.colors)
        script.add(
            FillLinearGradient(*gradient_endpoints(bg.angle, config.width, config.height), colors)
        )
    elif isinstance(bg, ColorBackground):
        script.add(FillColor(_color(bg.color, "transparent")))
    else:
        log.warning("background_skipped", type=bg.type)


def _compile_rounded_rect(comp: RoundedRectComponent, script: LayoutScript) -> None:
    script.add(
        FillRoundedRect(
            comp.x, comp.y, comp.width or 0, comp.height or 0,
            radius=comp.corner_radius or 0,
            color=_color(comp.fill_style, "transparent"),
            shadow=_shadow(comp.shadow),
        )
    )


def _compile_text(comp: TextComponent, doc: Mapping[str, Any], script: LayoutScript) -> None:
    text = substitute_tokens(comp.text, doc)
    if not text:
        return
    script.add(
        DrawText(
            text, comp.x, comp.y,
            font=parse_font(comp.font or DEFAULT_TEXT_FONT),
            color=_color(comp.fill_style, DEFAULT_TEXT_COLOR),
            align=_ALIGN.get(comp.text_align or "left", comp.text_align or "left"),
            max_width=comp.max_width or None,
        )
    )


def _compile_image(
    index: int,
    comp: ImageComponent,
    doc: Mapping[str, Any],
    script: LayoutScript,
    images: dict,
) -> None:
    ref = comp.image_url
    if not ref and comp.src_field:
        ref = stringify(resolve_path(doc, comp.src_field))
    if not ref:
        log.debug("image_component_unresolved", index=index, src_field=comp.src_field)
        return

    bitmap = load_optional(ref, role=f"component[{index}]")
    if bitmap is None:
        return
    name = f"component_{index}"
    images[name] = bitmap
    script.add(
        DrawImage(
            name, comp.x, comp.y,
            width=comp.width or None,
            height=comp.height or None,
            corner_radius=(comp.corner_radius or DEFAULT_CLIP_RADIUS) if comp.clip else None,
        )
    )


def _compile_star_rating(
    comp: StarRatingComponent, doc: Mapping[str, Any], script: LayoutScript
) -> None:
    triples = [
        (spec.label, resolve_token(spec.rating, doc), _color(spec.color, "gray"))
        for spec in comp.ratings
    ]
    badges = layout_badges(
        triples,
        default_width=comp.default_width or 100.0,
        special_width=comp.special_width or 120.0,
        default_spacing=comp.default_spacing or 110.0,
        special_spacing=comp.special_spacing or 130.0,
        start_x=comp.x,
    )
    if not badges:
        return
    script.add(
        DrawBadgeRow(
            tuple(badges), comp.y,
            height=comp.height or RATING_HEIGHT,
            radius=RATING_RADIUS,
            font=parse_font(comp.font or DEFAULT_RATING_FONT),
        )
    )


def compile_card_config(
    config: ConfigInput,
    data: Optional[Mapping[str, Any]] = None,
    star_ratings: Optional[StarRatings] = None,
    use_background: bool = False,
) -> tuple[LayoutScript, dict]:
    """
    Build the layout script for one card.
    Raises InvalidSchemaError before any asset is touched.
    """
    config = validate_config(config)
    doc = augment_data(data, star_ratings, use_background)

    script = LayoutScript(config.width, config.height)
    images: dict = {}

    script.add(PushClip(0, 0, config.width, config.height, radius=config.card_corner_radius))
    _compile_background(config, doc, script, images)

    for index, comp in enumerate(config.components):
        if isinstance(comp, RoundedRectComponent):
            _compile_rounded_rect(comp, script)
        elif isinstance(comp, TextComponent):
            _compile_text(comp, doc, script)
        elif isinstance(comp, ImageComponent):
            _compile_image(index, comp, doc, script, images)
        elif isinstance(comp, StarRatingComponent):
            _compile_star_rating(comp, doc, script)
        else:
            log.warning("component_skipped", index=index, type=comp.type)

    return script, images


# ─── Rendering ───────────────────────────────────────────────────────────────

def render_card_config(
    config: ConfigInput,
    data: Optional[Mapping[str, Any]] = None,
    star_ratings: Optional[StarRatings] = None,
    use_background: bool = False,
) -> Canvas:
    script, images = compile_card_config(config, data, star_ratings, use_background)
    return render_script(script, images)


def generate_card_from_config(
    config: ConfigInput,
    data: Optional[Mapping[str, Any]] = None,
    star_ratings: Optional[StarRatings] = None,
    use_background: bool = False,
) -> str:
    """Config-driven card as a PNG data URI."""
    script, images = compile_card_config(config, data, star_ratings, use_background)
    return render_to_data_uri(script, images, generator="config_card")
