import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from giftregistry.container import build_container
from giftregistry.core.config import Settings, settings as default_settings
from giftregistry.core.logging_config import setup_logging
from giftregistry.db.session import create_db_engine, create_session_factory, init_db
from giftregistry.pipeline.base import PipelineApp


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    settings = settings or default_settings
    engine = engine or create_db_engine(settings.database_url)
    container = build_container(settings, create_session_factory(engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        container.sessions.cleanup_expired()
        logger.info("Application started", extra={"project": settings.project_name})
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.project_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Is-Authenticated", "X-Process-Time"],
    )

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.mount("/", PipelineApp(container.pipeline))
    return app


def run() -> None:
    setup_logging(default_settings)
    uvicorn.run(create_app(), host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
