"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class SensorField(str, Enum):
    """Optional measurements a reading may carry, in wire order."""

    temperature = "temperature"
    humidity = "humidity"
    pressure = "pressure"


FIELD_RANGES: Dict[SensorField, Tuple[float, float]] = {
    SensorField.temperature: (15.0, 30.0),
    SensorField.humidity: (30.0, 80.0),
    SensorField.pressure: (980.0, 1040.0),
}

FIELD_UNITS: Dict[SensorField, str] = {
    SensorField.temperature: "°C",
    SensorField.humidity: "%",
    SensorField.pressure: " hPa",
}


@dataclass(frozen=True, slots=True)
class PartialReading:
    """A single sensor reading with one to three measurements present.

    ``None`` means the measurement was not taken; it is never sent as a value.
    """

    sensor_name: str
    location: str
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None

    def value_of(self, field: SensorField) -> Optional[float]:
        return getattr(self, field.value)

    def present_fields(self) -> List[Tuple[SensorField, float]]:
        present: List[Tuple[SensorField, float]] = []
        for field in SensorField:
            value = self.value_of(field)
            if value is not None:
                present.append((field, value))
        return present

    @property
    def field_count(self) -> int:
        return len(self.present_fields())
