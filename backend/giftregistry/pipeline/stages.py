import logging
import re
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from fastapi import status
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse, Response

from giftregistry.api.base import ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.core.errors import AppError, describe_validation_error
from giftregistry.pipeline.base import RequestHandler, Stage, error_response
from giftregistry.services.users import UserService


logger = logging.getLogger(__name__)

AUTH_CHECK_PATH = "/api/auth/check"
API_PREFIX = "/api/"
PUBLIC_WISHLIST_SHELL = "public-wishlist.html"
INDEX_SHELL = "index.html"

_SHARE_TOKEN_PATH = re.compile(r"^(/api/public/wishlists/|/wishlist/)[^/]+")


def redact_path(path: str) -> str:
    """Hide share tokens, which grant read access, from log lines."""
    return _SHARE_TOKEN_PATH.sub(r"\1<token>", path)


class LoggingStage(Stage):
    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        started = time.perf_counter()
        path = redact_path(request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error("%s %s failed after %.1fms", request.method, path, elapsed_ms)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            extra={"method": request.method, "path": path, "status_code": response.status_code},
        )
        return response


class AuthCheckStage(Stage):
    """Answers ``/api/auth/check`` itself and passes every other request on untouched."""

    def __init__(self, auth: AuthorizationHelper, users: UserService) -> None:
        self._auth = auth
        self._users = users

    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        if request.url.path != AUTH_CHECK_PATH:
            return await call_next(request)

        user_session = await run_in_threadpool(self._auth.resolve_session, request)
        username = None
        if user_session is not None:
            username = await run_in_threadpool(self._users.get_username, user_session.user_id)

        if username is None:
            return JSONResponse(
                {"authenticated": False},
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"X-Is-Authenticated": "false"},
            )
        return JSONResponse(
            {"authenticated": True, "userId": user_session.user_id, "username": username},
            headers={"X-Is-Authenticated": "true"},
        )


async def api_route_not_found(request: Request) -> Response:
    return error_response(status.HTTP_404_NOT_FOUND, "API route not found")


class RoutingStage(Stage):
    """Selects the resource handler for ``/api/`` paths by prefix.

    The selection is stored on ``request.state.endpoint``; the terminal
    handler runs it inside the error handling stage.
    """

    def __init__(self, handlers: Sequence[ResourceHandler]) -> None:
        self._handlers = list(handlers)

    def match(self, path: str) -> ResourceHandler | None:
        for handler in self._handlers:
            if handler.handles(path):
                return handler
        return None

    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        path = request.url.path
        if path.startswith(API_PREFIX) or path == API_PREFIX.rstrip("/"):
            request.state.endpoint = self.match(path) or api_route_not_found
        return await call_next(request)


class StaticFilesStage(Stage):
    """Serves the frontend for non-API paths.

    ``/wishlist/<token>`` gets the public wishlist shell, ``/`` and every
    unknown path get ``index.html``. Files under ``extra_roots`` prefixes
    (uploaded images) are served as-is with no shell fallback.
    """

    def __init__(self, root: str | Path, extra_roots: Mapping[str, str | Path] | None = None) -> None:
        self.root = Path(root).resolve()
        self.extra_roots = {
            prefix.rstrip("/"): Path(directory).resolve() for prefix, directory in (extra_roots or {}).items()
        }

    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        if getattr(request.state, "endpoint", None) is not None or request.url.path.startswith(API_PREFIX):
            return await call_next(request)
        if request.method not in ("GET", "HEAD"):
            return await call_next(request)

        file_path = self.resolve(request.url.path)
        if file_path is None:
            return await call_next(request)
        return FileResponse(file_path)

    def resolve(self, path: str) -> Path | None:
        for prefix, directory in self.extra_roots.items():
            if path.startswith(prefix + "/"):
                return _existing_file(directory, path[len(prefix) + 1:])

        if path.startswith("/wishlist/"):
            shell = _existing_file(self.root, PUBLIC_WISHLIST_SHELL)
            if shell is not None:
                return shell
        elif path not in ("", "/"):
            candidate = _existing_file(self.root, path.lstrip("/"))
            if candidate is not None:
                return candidate

        return _existing_file(self.root, INDEX_SHELL)


def _existing_file(root: Path, relative: str) -> Path | None:
    candidate = (root / relative).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    if candidate.is_dir():
        candidate = candidate / INDEX_SHELL
    return candidate if candidate.is_file() else None


class ErrorHandlingStage(Stage):
    """Innermost stage: turns any failure below it into a JSON error envelope."""

    async def __call__(self, request: Request, call_next: RequestHandler) -> Response:
        try:
            return await call_next(request)
        except AppError as exc:
            return error_response(exc.status_code, exc.message)
        except PydanticValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_error(exc))
        except Exception:
            logger.exception(
                "Unhandled error while processing request",
                extra={"method": request.method, "path": redact_path(request.url.path)},
            )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def dispatch_endpoint(request: Request) -> Response:
    """Terminal handler: run the endpoint chosen by routing, otherwise 404."""
    endpoint = getattr(request.state, "endpoint", None)
    if endpoint is None:
        return error_response(status.HTTP_404_NOT_FOUND, "Not Found")
    return await endpoint(request)
