"""HTTP routes of the local ingestion endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas import SensorPayload, SensorRecord
from datastore.reading_store import ReadingStore, build_default_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sensors", tags=["sensors"])
health_router = APIRouter()


def get_store() -> ReadingStore:
    return build_default_store()


def _not_found(reading_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Sensor reading {reading_id} not found.",
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SensorRecord,
    summary="Store a (possibly partial) sensor reading.",
)
async def create_reading(
    payload: SensorPayload,
    store: ReadingStore = Depends(get_store),
) -> SensorRecord:
    record = store.create(payload)
    logger.info(
        "Stored reading from %s",
        record.name,
        extra={"sensor": record.name, "reading_id": record.id},
    )
    return record


@router.get("", response_model=list[SensorRecord], summary="List all stored readings.")
async def list_readings(store: ReadingStore = Depends(get_store)) -> list[SensorRecord]:
    return store.scan()


@router.get(
    "/location/{location}",
    response_model=list[SensorRecord],
    summary="List readings reported from a location.",
)
async def readings_by_location(
    location: str,
    store: ReadingStore = Depends(get_store),
) -> list[SensorRecord]:
    return store.find_by_location(location)


@router.get(
    "/name/{name}",
    response_model=list[SensorRecord],
    summary="List readings reported by a sensor name.",
)
async def readings_by_name(
    name: str,
    store: ReadingStore = Depends(get_store),
) -> list[SensorRecord]:
    return store.find_by_name(name)


@router.get("/{reading_id}", response_model=SensorRecord, summary="Fetch one reading.")
async def get_reading(
    reading_id: int,
    store: ReadingStore = Depends(get_store),
) -> SensorRecord:
    record = store.get(reading_id)
    if record is None:
        raise _not_found(reading_id)
    return record


@router.put("/{reading_id}", response_model=SensorRecord, summary="Replace a stored reading.")
async def update_reading(
    reading_id: int,
    payload: SensorPayload,
    store: ReadingStore = Depends(get_store),
) -> SensorRecord:
    record = store.update(reading_id, payload)
    if record is None:
        raise _not_found(reading_id)
    return record


@router.delete(
    "/{reading_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored reading.",
)
async def delete_reading(
    reading_id: int,
    store: ReadingStore = Depends(get_store),
) -> Response:
    if not store.delete(reading_id):
        raise _not_found(reading_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@health_router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
