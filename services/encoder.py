"""JSON encoding of partial readings."""

from __future__ import annotations

from app.schemas import SensorPayload
from models.records import FIELD_UNITS, PartialReading

CONTENT_TYPE = "application/json"


def to_payload(reading: PartialReading) -> SensorPayload:
    measurements = {field.value: value for field, value in reading.present_fields()}
    return SensorPayload(name=reading.sensor_name, location=reading.location, **measurements)


def encode(reading: PartialReading) -> bytes:
    """Serialize ``reading`` to JSON, leaving out measurements that are not present.

    Floats keep their full precision; rounding is only applied in log output.
    """
    return to_payload(reading).model_dump_json(exclude_none=True).encode("utf-8")


def decode(body: bytes | str) -> PartialReading:
    payload = SensorPayload.model_validate_json(body)
    return from_payload(payload)


def from_payload(payload: SensorPayload) -> PartialReading:
    return PartialReading(
        sensor_name=payload.name,
        location=payload.location,
        temperature=payload.temperature,
        humidity=payload.humidity,
        pressure=payload.pressure,
    )


def describe(reading: PartialReading) -> str:
    """Human readable rendering used in log lines, e.g. ``Temperature=22.30°C``."""
    parts = [
        f"{field.value.capitalize()}={value:.2f}{FIELD_UNITS[field]}"
        for field, value in reading.present_fields()
    ]
    return ", ".join(parts)
