# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Global Error Handler
Converts engine and API exceptions into structured JSON error bodies:
    {"error": {"code": ..., "message": ..., "detail"?: ...}}
Registered on the FastAPI app in main.py.
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from artgen.core.errors import (
    AssetDecodeError,
    AssetFetchError,
    InvalidCanvasSizeError,
    InvalidSchemaError,
)
from artgen.utils.logger import get_logger

log = get_logger(__name__)


class JobNotFoundError(KeyError):
    """Raised when a job_id does not exist in the store."""


def _error_body(code: str, message: str, detail=None) -> dict:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return body


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers on the FastAPI application.
    Call this in main.py after creating the app instance.
    """

    @app.exception_handler(AssetFetchError)
    async def asset_fetch_handler(req: Request, exc: AssetFetchError) -> JSONResponse:
        log.warning("asset_fetch_error", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=_error_body(
                code="ASSET_FETCH_ERROR",
                message="A required image could not be fetched.",
                detail=str(exc),
            ),
        )

    @app.exception_handler(AssetDecodeError)
    async def asset_decode_handler(req: Request, exc: AssetDecodeError) -> JSONResponse:
        log.warning("asset_decode_error", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(
                code="ASSET_DECODE_ERROR",
                message="A required image could not be decoded.",
                detail=str(exc),
            ),
        )

    @app.exception_handler(InvalidSchemaError)
    async def invalid_schema_handler(req: Request, exc: InvalidSchemaError) -> JSONResponse:
        log.warning("invalid_card_config", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(
                code="INVALID_CARD_CONFIG",
                message=str(exc),
                detail=jsonable_encoder(exc.errors),
            ),
        )

    @app.exception_handler(InvalidCanvasSizeError)
    async def canvas_size_handler(req: Request, exc: InvalidCanvasSizeError) -> JSONResponse:
        log.warning("invalid_canvas_size", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(code="INVALID_CANVAS_SIZE", message=str(exc)),
        )

    @app.exception_handler(JobNotFoundError)
    async def job_not_found_handler(
        req: Request, exc: JobNotFoundError
    ) -> JSONResponse:
        log.warning("job_not_found", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="JOB_NOT_FOUND",
                message=f"Job not found: {exc}",
            ),
        )

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        log.error(
            "unhandled_exception",
            path=str(req.url),
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred.",
            ),
        )
