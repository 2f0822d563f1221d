# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — FastAPI Application Entry Point
Creates the app, registers lifespan events, CORS, routers,
and global error handlers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from artgen.api.middleware.error_handler import register_error_handlers
from artgen.api.routes import assets, batch, generate, status
from artgen.config import get_settings
from artgen.dependencies import init_job_store
from artgen.modules.assets.icons import load_logo
from artgen.utils.logger import configure_logging, get_logger

log = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: configure logging, initialise the JobStore, warm the logo cache.
    """
    # ── Startup ──────────────────────────────────────────────────────────────
    configure_logging()
    settings = get_settings()

    log.info(
        "artgen_startup",
        version=VERSION,
        assets_dir=str(settings.assets_dir),
        job_store=settings.job_store_backend,
        dev_server_origin=settings.dev_server_origin,
    )

    init_job_store()

    log.info("logo_warmup", available=load_logo() is not None)

    log.info("artgen_ready")
    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    log.info("artgen_shutdown")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="ArtGen",
        summary="Beat Saber map cards and thumbnails, rendered server-side.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.dev_server_origin,  # desktop renderer dev server
            "http://localhost:5173",     # Vite dev server
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ───────────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(generate.router)
    app.include_router(batch.router)
    app.include_router(status.router)
    app.include_router(assets.router)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/health", tags=["health"], summary="Health check")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": "artgen",
            "version": VERSION,
            "job_store": settings.job_store_backend,
        }

    return app


# Module-level app instance for uvicorn
app = create_app()
