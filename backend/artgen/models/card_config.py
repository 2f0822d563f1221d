# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — CardConfig Document Models
Declarative card layouts interpreted by modules/config_card.
Wire format is the camelCase JSON saved by the card designer; every
coordinate is in output pixels and components draw in list order.

Background and component tags outside the known sets validate as
UnknownBackground / UnknownComponent so documents written by newer
designers still load.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ShadowSpec(_ConfigModel):
    color: str = "rgba(0, 0, 0, 0.5)"
    offset_x: float = 0.0
    offset_y: float = 0.0
    blur: float = 0.0


class RatingSpec(_ConfigModel):
    label: str = ""
    # Literal value or a whole-string "{dotted.path}" token
    rating: str = ""
    color: str = "gray"


# ─── Backgrounds ─────────────────────────────────────────────────────────────

class ColorBackground(_ConfigModel):
    type: Literal["color"] = "color"
    color: str = "transparent"


class GradientBackground(_ConfigModel):
    type: Literal["gradient"] = "gradient"
    colors: list[str] = Field(default_factory=lambda: ["#000000", "#ffffff"], min_length=1)
    # CSS convention: 180 = top to bottom, 90 = left to right
    angle: float = 180.0


class CoverBackground(_ConfigModel):
    type: Literal["cover"] = "cover"
    src_field: Optional[str] = None
    blur: float = 0.0


class UnknownBackground(BaseModel):
    """Any background tag this version cannot paint. Fields are kept verbatim."""
    model_config = ConfigDict(extra="allow")

    type: str


KNOWN_BACKGROUND_TYPES = frozenset({"color", "gradient", "cover"})


def _background_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in KNOWN_BACKGROUND_TYPES else "unknown"


BackgroundSpec = Annotated[
    Union[
        Annotated[ColorBackground, Tag("color")],
        Annotated[GradientBackground, Tag("gradient")],
        Annotated[CoverBackground, Tag("cover")],
        Annotated[UnknownBackground, Tag("unknown")],
    ],
    Discriminator(_background_tag),
]


# ─── Components ──────────────────────────────────────────────────────────────

class _ComponentBase(_ConfigModel):
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None


class RoundedRectComponent(_ComponentBase):
    type: Literal["roundedRect"] = "roundedRect"
    fill_style: Optional[str] = None
    corner_radius: Optional[float] = None
    shadow: Optional[ShadowSpec] = None


class TextComponent(_ComponentBase):
    type: Literal["text"] = "text"
    text: str = ""
    font: Optional[str] = None
    fill_style: Optional[str] = None
    max_width: Optional[float] = None
    text_align: Optional[Literal["left", "right", "center", "start", "end"]] = None


class ImageComponent(_ComponentBase):
    type: Literal["image"] = "image"
    image_url: Optional[str] = None
    src_field: Optional[str] = None
    clip: bool = False
    corner_radius: Optional[float] = None


class StarRatingComponent(_ComponentBase):
    type: Literal["starRating"] = "starRating"
    ratings: list[RatingSpec] = Field(default_factory=list)
    font: Optional[str] = None
    default_width: float = 100.0
    special_width: float = 120.0
    default_spacing: float = 110.0
    special_spacing: float = 130.0


class UnknownComponent(BaseModel):
    """Any component tag this version cannot draw. Fields are kept verbatim."""
    model_config = ConfigDict(extra="allow")

    type: str


KNOWN_COMPONENT_TYPES = frozenset({"roundedRect", "text", "image", "starRating"})


def _component_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in KNOWN_COMPONENT_TYPES else "unknown"


ComponentSpec = Annotated[
    Union[
        Annotated[RoundedRectComponent, Tag("roundedRect")],
        Annotated[TextComponent, Tag("text")],
        Annotated[ImageComponent, Tag("image")],
        Annotated[StarRatingComponent, Tag("starRating")],
        Annotated[UnknownComponent, Tag("unknown")],
    ],
    Discriminator(_component_tag),
]


# ─── Document ────────────────────────────────────────────────────────────────

class CardConfig(_ConfigModel):
    width: int
    height: int
    card_corner_radius: float
    background: BackgroundSpec
    components: list[ComponentSpec] = Field(default_factory=list)
    config_name: Optional[str] = None

    def to_json(self) -> str:
        """Serialise in the designer's camelCase wire format."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
