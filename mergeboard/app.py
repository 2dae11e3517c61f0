"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import register_error_handlers, register_routes
from .core import ALLOWED_CORS_ORIGINS, DB_AUTO_PROVISION, configure_logging, get_engine
from .services.schema import provision_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DB_AUTO_PROVISION:
        provision_schema(get_engine())
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Merge Game Scores API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    register_routes(app)
    logger.info("Application created with %d CORS origins", len(ALLOWED_CORS_ORIGINS))
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mergeboard.app:app", host="127.0.0.1", port=3000, reload=True)
