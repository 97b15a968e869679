"""Ordered error classification for the upload route.

Classifiers run in order; the first one that recognises an exception
turns it into an :class:`UploadError`. The generic classifier accepts
anything, so every exception ends up with a response.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from src.fridge_fusion.exceptions import MalformedUploadError, ServerError, UploadError

logger = logging.getLogger(__name__)

ErrorClassifier = Callable[[Exception], UploadError | None]


def classify_multipart_error(exc: Exception) -> UploadError | None:
    """Recognise pipeline errors and failures of the multipart parser."""
    if isinstance(exc, UploadError):
        return exc
    if isinstance(exc, MultiPartException):
        return MalformedUploadError(exc.message)
    # Starlette re-raises parser failures as HTTP 400 inside an app
    if isinstance(exc, HTTPException) and exc.status_code == 400:
        return MalformedUploadError(str(exc.detail))
    return None


def classify_unexpected_error(exc: Exception) -> UploadError:
    return ServerError(str(exc))


ERROR_CLASSIFIERS: tuple[ErrorClassifier, ...] = (
    classify_multipart_error,
    classify_unexpected_error,
)


def resolve_upload_error(exc: Exception) -> JSONResponse:
    """Run *exc* through ``ERROR_CLASSIFIERS`` and render the first match."""
    for classify in ERROR_CLASSIFIERS:
        error = classify(exc)
        if error is None:
            continue

        if error.status_code >= 500:
            logger.error("Unknown upload error: %s", exc, exc_info=exc)
        else:
            logger.warning("Upload rejected: %s", error.message)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Unreachable while the generic classifier closes the chain
    raise exc


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render framework HTTP errors (auth, 404s) as ``{"message": …}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=exc.headers,
    )
