import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from schemas.common import ErrorDetail, ErrorResponse
from utils.exceptions import (
    ConnectionProviderError,
    DuplicateStudentError,
    InvalidSortCriterionError,
    RosterError,
    RosterLoadError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message), latency_ms=0)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# 명단 예외 → (HTTP 상태, 에러 코드), 위에서부터 먼저 매칭
_ROSTER_ERRORS = (
    (InvalidSortCriterionError, 400, "INVALID_SORT_CRITERION"),
    (DuplicateStudentError, 409, "DUPLICATE_STUDENT"),
    (ConnectionProviderError, 503, "DB_UNAVAILABLE"),
    (RosterLoadError, 503, "ROSTER_LOAD_FAILED"),
)


def add_error_handlers(app: FastAPI):
    @app.exception_handler(RosterError)
    async def roster_exception_handler(request: Request, exc: RosterError):
        for exc_type, status_code, code in _ROSTER_ERRORS:
            if isinstance(exc, exc_type):
                logger.warning(f"{request.method} {request.url.path} → {code}: {exc}")
                return _error_response(status_code, code, str(exc))

        logger.error(f"{request.method} {request.url.path} → ROSTER_ERROR: {exc}")
        return _error_response(500, "ROSTER_ERROR", str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(500, "INTERNAL_ERROR", str(exc))
