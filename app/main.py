from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from datastore.document_store import build_default_collection
from logging_config import configure_logging


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        yield
    finally:
        build_default_collection.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Facility Energy Readings",
        description="Read-only access to seeded energy consumption records.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
