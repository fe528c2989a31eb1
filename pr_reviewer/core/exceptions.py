"""Обработка исключений."""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_body(code: str, message, **extra) -> dict:
    """Тело ответа с ошибкой в едином формате."""
    return {"error": {"code": code, "message": message, **extra}}


class ServiceException(HTTPException):
    """
    Ошибка бизнес-правила.
    Подклассы задают код, HTTP-статус и текст по умолчанию.
    """

    code = "SERVICE_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    message = "request rejected"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(status_code=self.http_status, detail=error_body(self.code, self.message))

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class AlreadyExistsException(ServiceException):
    """Сущность с таким идентификатором уже существует."""


class TeamExistsException(AlreadyExistsException):
    code = "TEAM_EXISTS"
    message = "team_name already exists"


class PRExistsException(AlreadyExistsException):
    code = "PR_EXISTS"
    http_status = status.HTTP_409_CONFLICT
    message = "PR id already exists"


class NotFoundException(ServiceException):
    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "resource"):
        super().__init__(f"{resource} not found")


class PRMergedException(ServiceException):
    """Изменение ревьюверов у PR в статусе MERGED."""

    code = "PR_MERGED"
    http_status = status.HTTP_409_CONFLICT
    message = "cannot reassign on merged PR"


class NotAssignedException(ServiceException):
    code = "NOT_ASSIGNED"
    http_status = status.HTTP_409_CONFLICT
    message = "reviewer is not assigned to this PR"


class NoCandidateException(ServiceException):
    """В команде не осталось активного участника для замены."""

    code = "NO_CANDIDATE"
    http_status = status.HTTP_409_CONFLICT
    message = "no active replacement candidate in team"


async def service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Обработчик HTTP исключений."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", exc.detail),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Обработчик ошибок валидации."""
    return JSONResponse(
        status_code=422,
        content=error_body(
            "VALIDATION_ERROR", "Validation error", details=jsonable_encoder(exc.errors())
        ),
    )


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Обработчик всех прочих ошибок (хранилище, драйвер и т.п.).
    Детали пишутся в лог, клиенту уходит только общий код.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "internal server error"),
    )
