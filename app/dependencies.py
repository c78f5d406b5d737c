from __future__ import annotations

from fastapi import Request

from datastore.measurements import MeasurementSink
from services.forwarding import ForwardingService


def get_forwarding(request: Request) -> ForwardingService:
    return request.app.state.forwarding


def get_sink(request: Request) -> MeasurementSink:
    return request.app.state.sink
