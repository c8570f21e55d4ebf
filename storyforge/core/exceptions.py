from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse


class AppError(Exception):
    """Base application error with consistent schema."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED", status_code=status.HTTP_401_UNAUTHORIZED)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND", status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request", details: dict[str, Any] | None = None):
        super().__init__(message, code="BAD_REQUEST", status_code=status.HTTP_400_BAD_REQUEST, details=details)


# Business-rule violations: all surface as 400 with a specific message.

class InsufficientCreditsError(AppError):
    def __init__(self, message: str = "Insufficient credits", details: dict[str, Any] | None = None):
        super().__init__(
            message, code="INSUFFICIENT_CREDITS", status_code=status.HTTP_400_BAD_REQUEST, details=details
        )


class AlreadyClaimedError(AppError):
    def __init__(self, message: str = "Reward already claimed", details: dict[str, Any] | None = None):
        super().__init__(message, code="ALREADY_CLAIMED", status_code=status.HTTP_400_BAD_REQUEST, details=details)


class QuestNotCompletedError(AppError):
    def __init__(self, message: str = "Quest not completed"):
        super().__init__(message, code="QUEST_NOT_COMPLETED", status_code=status.HTTP_400_BAD_REQUEST)


class AIGenerationError(AppError):
    """The generative API failed or returned nothing usable."""

    def __init__(self, message: str = "AI generation failed"):
        super().__init__(message, code="AI_GENERATION_FAILED", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _body(request: Request, message: str, code: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"message": message, "code": code}
    if details:
        body["details"] = details
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return body


def error_response(request: Request, exc: AppError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=exc.status_code,
        content=_body(request, exc.message, exc.code, exc.details),
    )


async def app_exception_handler(request: Request, exc: AppError) -> ORJSONResponse:
    if exc.status_code >= 500:
        from storyforge.core.logging import get_logger
        get_logger(__name__).error("app_error", code=exc.code, error=exc.message, path=request.url.path)
    return error_response(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_body(
            request,
            "Invalid request",
            "VALIDATION_ERROR",
            {"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    from storyforge.core.logging import get_logger
    get_logger(__name__).exception("unhandled_exception", exc_info=exc)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body(request, "Internal server error", "INTERNAL_ERROR"),
    )
