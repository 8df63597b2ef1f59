from __future__ import annotations

from fastapi import HTTPException, Request, status

from resumeos.ai.errors import ClassifiedError, ErrorCode, TailorError
from resumeos.ai.factory import get_ai_client
from resumeos.ai.types import AIClientFactory
from resumeos.core.store import StateStore

_STATUS_BY_CODE = {
    ErrorCode.DAILY_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.INVALID_KEY: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.PERMISSION: status.HTTP_403_FORBIDDEN,
    ErrorCode.SERVER_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.UNKNOWN: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.NO_KEY: status.HTTP_409_CONFLICT,
    ErrorCode.NO_RESUME: status.HTTP_409_CONFLICT,
}


def get_store(request: Request) -> StateStore:
    return request.app.state.store


def get_client_factory() -> AIClientFactory:
    return get_ai_client


def error_response(error: ClassifiedError) -> HTTPException:
    headers = None
    if error.retry_after is not None:
        headers = {"Retry-After": str(error.retry_after)}
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(error.code, status.HTTP_502_BAD_GATEWAY),
        detail=error.as_dict(),
        headers=headers,
    )


def raise_tailor_error(exc: TailorError) -> None:
    raise error_response(exc.error) from exc
