"""
Student records API: application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.routes import router as records_router
from auth.routes import router as auth_router
from config.settings import config
from database.session import dispose_engine, init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("asyncio", "sqlalchemy.engine", "uvicorn.access"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.uses_default_secret:
        logger.warning("JWT_SECRET not set, tokens are signed with the development default")

    logger.info("Preparing database schema…")
    await init_models()
    logger.info("Application ready to accept requests on port %d.", config.port)
    yield
    await dispose_engine()


def create_app(*, manage_database: bool = True) -> FastAPI:
    app = FastAPI(
        title="Student Records API",
        version="1.0.0",
        description="Student authentication, schedules and records export.",
        lifespan=lifespan if manage_database else None,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix=config.api_prefix)
    app.include_router(records_router, prefix=config.api_prefix)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
