import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from fastapi import status
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send


logger = logging.getLogger(__name__)

RequestHandler = Callable[[Request], Awaitable[Response]]


def success_response(
    payload: dict[str, Any] | None = None,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse({"status": "success", **(payload or {})}, status_code=status_code, headers=headers)


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code, headers=headers)


class Stage:
    """One link of the request pipeline.

    A stage may inspect the request, answer it itself, or hand it on by
    awaiting ``call_next``.
    """

    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        raise NotImplementedError


class Pipeline:
    """Fixed chain of stages wrapped around a terminal handler; the first stage is outermost."""

    def __init__(self, stages: Sequence[Stage], terminal: RequestHandler) -> None:
        self.stages = list(stages)
        handler = terminal
        for stage in reversed(self.stages):
            handler = _bind(stage, handler)
        self._entry = handler

    async def handle(self, request: Request) -> Response:
        return await self._entry(request)


def _bind(stage: Stage, call_next: RequestHandler) -> RequestHandler:
    async def handler(request: Request) -> Response:
        return await stage(request, call_next)

    return handler


class PipelineApp:
    """ASGI adapter feeding HTTP requests into a ``Pipeline``."""

    def __init__(self, pipeline: Pipeline) -> None:
        self.pipeline = pipeline

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await send({"type": "websocket.close", "code": 1000})
            return
        if scope["type"] != "http":
            return

        request = Request(scope, receive)
        try:
            response = await self.pipeline.handle(request)
        except Exception:
            logger.exception("Unhandled error outside the request pipeline")
            response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
        await response(scope, receive, send)
