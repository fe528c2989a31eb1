"""Ограничение времени обработки запроса."""

import asyncio
import logging

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pr_reviewer.core.exceptions import error_body

logger = logging.getLogger(__name__)


class DeadlineMiddleware:
    """
    ASGI middleware, которое отменяет обработку запроса по истечении таймаута.

    Отмена доходит до каждого ожидания в репозиториях, сессия из session_scope
    откатывает транзакцию, поэтому частично выполненная операция не фиксируется.
    """

    def __init__(self, app: ASGIApp, timeout: float):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or not self.timeout or self.timeout <= 0:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Request %s %s cancelled after %.2fs", scope["method"], scope["path"], self.timeout
            )
            if response_started:
                raise
            response = JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content=error_body("TIMEOUT", "request deadline exceeded"),
            )
            await response(scope, receive, send)
