from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from patient_api.api.routes import router as api_router
from patient_api.core.config import AppConfig, get_settings
from patient_api.core.logging import setup_logging
from patient_api.services.db import Database


def create_app(settings: AppConfig | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, env=settings.env)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = database or Database(settings.database_url, echo=settings.database_echo)
        try:
            db.init_db()
            db.ping()
        except Exception:
            logger.exception("Failed to connect to the database")
            db.dispose()
            raise
        app.state.database = db
        try:
            yield
        finally:
            db.dispose()
            logger.info("Database connections released")

    app = FastAPI(title="Patient Records API", version="0.1.0", lifespan=lifespan)

    app.include_router(api_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()
