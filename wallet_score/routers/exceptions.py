from __future__ import annotations

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wallet_score.core.config import settings
from wallet_score.core.errors import (
    DomainError,
    InternalServerError,
    InvalidInputError,
    InvalidScoreError,
    InvalidWalletError,
)
from wallet_score.core.logging import get_correlation_id, get_logger

logger = get_logger("wallet_score.routers.exceptions", component="router")


def _error_payload(error: str, code: str) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "error": error, "code": code}
    correlation_id = get_correlation_id()
    if correlation_id:
        payload["correlation_id"] = correlation_id
    return payload


def domain_error_response(exc: DomainError) -> JSONResponse:
    payload = _error_payload(exc.message, exc.error_code)
    if exc.status_code >= 500:
        # driver messages can leak connection details; only surface them in debug
        if settings.debug and exc.detail is not None:
            payload["details"] = str(exc.detail)
    elif isinstance(exc.detail, dict):
        payload.update(exc.detail)
    elif exc.detail is not None:
        payload["details"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=payload)


def _validation_error_to_domain(exc: RequestValidationError) -> InvalidInputError:
    errors = exc.errors()
    for field, error_cls in (("wallet", InvalidWalletError), ("score", InvalidScoreError)):
        for err in errors:
            if field in err.get("loc", ()):
                original = (err.get("ctx") or {}).get("error")
                if isinstance(original, InvalidInputError):
                    return original
                return error_cls(detail=err.get("msg"))
    return InvalidInputError(detail="Request body must be a JSON object with wallet and score")


def register_exception_handlers(app: FastAPI) -> None:
    """Register translators that render every failure as ``{success: false, ...}``."""

    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        return domain_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        domain_exc = _validation_error_to_domain(exc)
        logger.info(
            "request_validation_failed",
            extra={"structured_data": {"path": request.url.path, "code": domain_exc.error_code}},
        )
        return domain_error_response(domain_exc)

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # unknown paths and wrong methods on known paths both read as a missing endpoint
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content=_error_payload("Endpoint not found", "endpoint_not_found"))
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(str(exc.detail), "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_exception", extra={"structured_data": {"path": request.url.path}})
        failure = InternalServerError()
        if settings.debug:
            failure.detail = "".join(traceback.format_exception(exc))
        return domain_error_response(failure)
