"""HTTP middleware and exception handler wiring for FastAPI apps."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chirpy.api.contracts import ApiErrorResponse
from chirpy.api.errors import ApiErrorCode, to_error_payload
from chirpy.auth.errors import AuthError
from chirpy.chirps.errors import ChirpTooLongError, NotChirpAuthorError
from chirpy.core.config import AppConfig
from chirpy.core.logging import set_correlation_id
from chirpy.core.security import HashingError
from chirpy.store.errors import DuplicateEmailError, NotFoundError, StoreIOError

_NOT_FOUND_CODES = {
    "user": ApiErrorCode.USER_NOT_FOUND,
    "chirp": ApiErrorCode.CHIRP_NOT_FOUND,
}


def _error_response(
    status_code: int, error_code: ApiErrorCode, message: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(error_code=error_code, message=message).model_dump(),
    )


def _request_extra(request: Request, status_code: int) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
    }


def register_http_middleware(app: FastAPI, *, config: AppConfig, logger: Any) -> None:
    """Attach common security and observability middleware to an app."""

    @app.middleware("http")
    async def request_size_limit_middleware(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                parsed_length = int(content_length)
            except ValueError:
                parsed_length = 0
            if parsed_length > config.security.request_max_bytes:
                return _error_response(
                    413,
                    ApiErrorCode.REQUEST_TOO_LARGE,
                    "Request size exceeds configured limit "
                    f"({config.security.request_max_bytes} bytes).",
                )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        correlation_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or uuid.uuid4().hex
        )
        set_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        logger.info(
            "request_completed",
            extra=_request_extra(request, response.status_code),
        )
        return response


def register_exception_handlers(app: FastAPI, *, logger: Any) -> None:
    """Attach API exception handlers that return stable error contracts."""

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        extra = _request_extra(request, exc.status_code)
        extra["error_code"] = str(exc.error_code)
        logger.warning("auth_rejected", extra=extra)
        return _error_response(exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.info("not_found", extra=_request_extra(request, 404))
        error_code = _NOT_FOUND_CODES.get(exc.kind, ApiErrorCode.USER_NOT_FOUND)
        return _error_response(404, error_code, str(exc))

    @app.exception_handler(DuplicateEmailError)
    async def handle_duplicate_email(
        request: Request, exc: DuplicateEmailError
    ) -> JSONResponse:
        logger.info("duplicate_email", extra=_request_extra(request, 409))
        return _error_response(409, ApiErrorCode.USER_EMAIL_IN_USE, "Email already in use")

    @app.exception_handler(ChirpTooLongError)
    async def handle_chirp_too_long(
        request: Request, exc: ChirpTooLongError
    ) -> JSONResponse:
        return _error_response(400, ApiErrorCode.CHIRP_TOO_LONG, str(exc))

    @app.exception_handler(NotChirpAuthorError)
    async def handle_not_author(
        request: Request, exc: NotChirpAuthorError
    ) -> JSONResponse:
        logger.warning("chirp_forbidden", extra=_request_extra(request, 403))
        return _error_response(403, ApiErrorCode.CHIRP_FORBIDDEN, str(exc))

    @app.exception_handler(StoreIOError)
    async def handle_store_error(request: Request, exc: StoreIOError) -> JSONResponse:
        logger.error(
            "store_failure", exc_info=exc, extra=_request_extra(request, 500)
        )
        return _error_response(
            500, ApiErrorCode.STORE_UNAVAILABLE, "Storage is unavailable"
        )

    @app.exception_handler(HashingError)
    async def handle_hashing_error(request: Request, exc: HashingError) -> JSONResponse:
        logger.error(
            "hashing_failure", exc_info=exc, extra=_request_extra(request, 500)
        )
        return _error_response(
            500, ApiErrorCode.INTERNAL_SERVER_ERROR, "Internal server error"
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        payload = to_error_payload(exc.detail, exc.status_code)
        logger.warning(
            "http_exception",
            extra=_request_extra(request, exc.status_code),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiErrorResponse(**payload).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.warning("validation_exception", extra=_request_extra(request, 422))
        return _error_response(422, ApiErrorCode.VALIDATION_ERROR, str(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception("unexpected_exception", extra=_request_extra(request, 500))
        return _error_response(
            500, ApiErrorCode.INTERNAL_SERVER_ERROR, "Internal server error"
        )
