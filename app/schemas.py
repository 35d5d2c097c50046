"""Pydantic schemas for the sensor payload and the ingestion API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SensorPayload(BaseModel):
    """Wire representation of a reading; absent measurements are omitted."""

    name: str = Field(..., min_length=1, description="Sensor name.")
    location: str = Field(..., min_length=1, description="Where the sensor is installed.")
    temperature: Optional[float] = Field(default=None, description="Degrees Celsius.")
    humidity: Optional[float] = Field(default=None, description="Relative humidity in percent.")
    pressure: Optional[float] = Field(default=None, description="Pressure in hPa.")


class SensorRecord(SensorPayload):
    """A stored reading as returned by the ingestion API."""

    id: int = Field(..., ge=1)
    measurement_time: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None
