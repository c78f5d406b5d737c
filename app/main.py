from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from app.api import router
from app.web import router as web_router
from datastore.lease_store import LeaseStore
from datastore.measurements import MeasurementSink
from logging_config import configure_logging
from services.forwarding import ForwardingService
from settings import Settings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    sink: MeasurementSink = app.state.sink
    if app.state.settings.create_schema:
        sink.ensure_schema()
    try:
        yield
    finally:
        sink.close()


def create_app(
    settings: Optional[Settings] = None,
    forwarding: Optional[ForwardingService] = None,
    sink: Optional[MeasurementSink] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="IP Relay",
        description="Redirects clients to a dynamically addressed backend and stores room measurements.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.forwarding = forwarding or ForwardingService(LeaseStore())
    app.state.sink = sink or MeasurementSink.from_url(
        settings.database_url, table_name=settings.measurement_table
    )
    app.include_router(router)
    app.include_router(web_router)
    return app
