# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — POST /generate/*
One endpoint per engine entry point. Generation blocks on asset fetches
and rasterisation, so each call runs in a worker thread.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from artgen.models.requests import (
    CardRequest,
    ConfigCardRequest,
    ImageResponse,
    ReweightCardRequest,
    SsrmThumbnailRequest,
    ThumbnailRequest,
)
from artgen.modules.config_card import generate_card_from_config
from artgen.modules.generators import (
    generate_batch_thumbnail,
    generate_card,
    generate_playlist_thumbnail,
    generate_reweight_card,
    generate_ssrm_thumbnail,
)
from artgen.utils.logger import get_logger

router = APIRouter(prefix="/generate", tags=["generate"])
log = get_logger(__name__)


@router.post("/card", response_model=ImageResponse, summary="Map card (900×300)")
async def card(req: CardRequest) -> ImageResponse:
    log.info("generate_request", generator="card", map_id=req.map_info.id)
    image = await asyncio.to_thread(
        generate_card, req.map_info, req.star_ratings, req.use_background
    )
    return ImageResponse(image=image)


@router.post(
    "/reweight-card", response_model=ImageResponse, summary="Reweight card (800×270)"
)
async def reweight_card(req: ReweightCardRequest) -> ImageResponse:
    log.info(
        "generate_request",
        generator="reweight_card",
        map_id=req.map_info.id,
        difficulty=req.chosen_difficulty,
    )
    image = await asyncio.to_thread(
        generate_reweight_card,
        req.map_info,
        req.old_star_ratings,
        req.new_star_ratings,
        req.chosen_difficulty,
    )
    return ImageResponse(image=image)


@router.post(
    "/batch-thumbnail", response_model=ImageResponse, summary="Batch thumbnail (1920×1080)"
)
async def batch_thumbnail(req: ThumbnailRequest) -> ImageResponse:
    log.info("generate_request", generator="batch_thumbnail", month=req.month_label)
    image = await asyncio.to_thread(
        generate_batch_thumbnail, req.background_ref, req.month_label, req.transform
    )
    return ImageResponse(image=image)


@router.post(
    "/playlist-thumbnail", response_model=ImageResponse, summary="Playlist thumbnail (512×512)"
)
async def playlist_thumbnail(req: ThumbnailRequest) -> ImageResponse:
    log.info("generate_request", generator="playlist_thumbnail", month=req.month_label)
    image = await asyncio.to_thread(
        generate_playlist_thumbnail, req.background_ref, req.month_label, req.transform
    )
    return ImageResponse(image=image)


@router.post(
    "/ssrm-thumbnail", response_model=ImageResponse, summary="SSRM thumbnail (1920×1080)"
)
async def ssrm_thumbnail(req: SsrmThumbnailRequest) -> ImageResponse:
    log.info(
        "generate_request",
        generator="ssrm_thumbnail",
        map_id=req.map_info.id,
        difficulty=req.chosen_difficulty,
    )
    image = await asyncio.to_thread(
        generate_ssrm_thumbnail,
        req.map_info,
        req.chosen_difficulty,
        req.star_ratings,
        req.background_ref,
    )
    return ImageResponse(image=image)


@router.post(
    "/config-card",
    response_model=ImageResponse,
    summary="Card from a CardConfig document",
    description=(
        "Renders `config` against `data`. `{dotted.path}` tokens in text and "
        "`srcField` lookups resolve through `data`, augmented with starRatings, "
        "useBackground and durationFormatted."
    ),
)
async def config_card(req: ConfigCardRequest) -> ImageResponse:
    log.info("generate_request", generator="config_card", config_name=req.config.get("configName"))
    image = await asyncio.to_thread(
        generate_card_from_config, req.config, req.data, req.star_ratings, req.use_background
    )
    return ImageResponse(image=image)
