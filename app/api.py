"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse

from app.client_ip import client_address
from app.dependencies import get_forwarding, get_sink
from datastore.measurements import MeasurementSink, MeasurementStorageError
from models.records import IPAddress, Measurement
from services.forwarding import ForwardingService

router = APIRouter()

# Column ranges of the measurement table.
_BIGINT_MIN, _BIGINT_MAX = -(2**63), 2**63 - 1
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


@router.post(
    "/ip_update",
    status_code=status.HTTP_200_OK,
    summary="Record the caller's address as the current backend address.",
)
async def ip_update(
    address: IPAddress = Depends(client_address),
    forwarding: ForwardingService = Depends(get_forwarding),
) -> Response:
    forwarding.announce(address)
    return Response(status_code=status.HTTP_200_OK)


# Declared sync so database latency stays on the worker threadpool.
@router.post(
    "/insert",
    response_class=PlainTextResponse,
    summary="Store a room measurement.",
)
def insert_measurement(
    temperatur: float = Query(..., description="Temperature reading."),
    kohlenstoff: int = Query(
        ..., ge=_BIGINT_MIN, le=_BIGINT_MAX, description="Carbon dioxide concentration."
    ),
    raum_id: int = Query(..., ge=_INT_MIN, le=_INT_MAX, description="Room identifier."),
    sink: MeasurementSink = Depends(get_sink),
) -> PlainTextResponse:
    measurement = Measurement(temperature=temperatur, carbon=kohlenstoff, room_id=raum_id)
    try:
        sink.insert(measurement)
    except MeasurementStorageError as exc:
        return PlainTextResponse(
            f"Error: {exc}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse("Success", status_code=status.HTTP_200_OK)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    forwarding: ForwardingService = Depends(get_forwarding),
) -> dict[str, str]:
    return {"status": "ok", "lease": forwarding.resolution().verdict.value}
