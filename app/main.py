from __future__ import annotations

from fastapi import FastAPI

from app.api import health_router, router
from logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Sensor Ingestion Stub",
        description="In-memory stand-in for the sensor ingestion service, for local simulator runs.",
        version="0.1.0",
    )
    app.include_router(router)
    app.include_router(health_router)
    return app


app = create_app()
