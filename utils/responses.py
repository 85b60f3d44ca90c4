from __future__ import annotations

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse

from config.settings import settings
from models.uber import UberDocument
from services.tree import to_uber
from utils.exceptions import UberError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# UBER media type
# -----------------------------------------------------------------------------
class UberResponse(JSONResponse):
    """
    Renders resources, collections and mappings as UBER+JSON.

    Endpoints return an UberResponse directly so the original objects (and
    their links) reach the renderer instead of a jsonable_encoder'd dict.
    """
    media_type = settings.UBER_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        document = to_uber(content)
        if document is None:
            return b""
        return document.model_dump_json().encode("utf-8")


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------
async def uber_error_handler(request: Request, exc: UberError) -> UberResponse:
    logger.error("UBER rendering failed for %s: %s", request.url.path, exc.message)
    document = UberDocument.from_error(exc.message, type(exc).__name__, 500)
    return UberResponse(document, status_code=500)


async def http_error_handler(request: Request, exc: HTTPException) -> UberResponse:
    document = UberDocument.from_error(str(exc.detail), "HTTPException", exc.status_code)
    return UberResponse(document, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> UberResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    document = UberDocument.from_error(
        problems, "RequestValidationError", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    return UberResponse(document, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
