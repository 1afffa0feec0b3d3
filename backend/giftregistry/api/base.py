import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, TypeVar

from fastapi import status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from giftregistry.api.deps import AuthorizationHelper
from giftregistry.core.errors import (
    AppError,
    AuthenticationRequired,
    NotFound,
    ValidationError,
    describe_validation_error,
)
from giftregistry.db.base import MAX_ID
from giftregistry.pipeline.base import error_response, success_response


logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class HandlerContext:
    request: Request
    body: bytes = b""
    params: dict[str, str] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def content_type(self) -> str | None:
        return self.request.headers.get("content-type")

    def json(self) -> Any:
        if not self.body.strip():
            return {}
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise ValidationError("Invalid JSON body") from exc

    def int_param(self, name: str) -> int:
        value = int(self.params[name])
        if value > MAX_ID:
            raise NotFound()
        return value


class ResourceHandler:
    """Base class for the ``/api/...`` resource handlers.

    Subclasses list the path prefixes they own and a route table of
    ``(method, path regex, method name)``. Handler methods are synchronous,
    run on the worker thread pool and receive a ``HandlerContext`` plus
    the regex's named groups. Expected failures (``AppError``) are turned
    into envelopes here; anything else propagates to the pipeline.
    """

    prefixes: tuple[str, ...] = ()
    routes: tuple[tuple[str, str, str], ...] = ()

    def __init__(self, auth: AuthorizationHelper) -> None:
        self.auth = auth
        self._routes = [(method, re.compile(pattern), name) for method, pattern, name in self.routes]

    def handles(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.prefixes)

    async def __call__(self, request: Request) -> Response:
        path = request.url.path.rstrip("/") or "/"
        for method, pattern, name in self._routes:
            if method != request.method:
                continue
            match = pattern.fullmatch(path)
            if match is None:
                continue
            context = HandlerContext(request=request, body=await request.body(), params=match.groupdict())
            try:
                return await run_in_threadpool(getattr(self, name), context)
            except AppError as exc:
                return error_response(exc.status_code, exc.message)

        return error_response(status.HTTP_404_NOT_FOUND, "Route not found")

    def current_user_id(self, context: HandlerContext) -> int | None:
        return self.auth.resolve_user_id(context.request)

    def require_user(self, context: HandlerContext) -> int:
        user_id = self.current_user_id(context)
        if user_id is None:
            raise AuthenticationRequired("Unauthorized")
        return user_id

    def parse(self, context: HandlerContext, schema: type[SchemaT]) -> SchemaT:
        data = context.json()
        if not isinstance(data, dict):
            raise ValidationError("JSON object expected")
        try:
            return schema.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(describe_validation_error(exc)) from exc

    def ok(self, status_code: int = status.HTTP_200_OK, **payload: Any) -> Response:
        return success_response(payload, status_code=status_code)
