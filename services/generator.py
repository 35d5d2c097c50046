"""Random generation of partial sensor readings."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict

from models.records import FIELD_RANGES, PartialReading, SensorField

_FIELDS = tuple(SensorField)


@dataclass(frozen=True)
class ComposedReading:
    """A generated reading together with the field count drawn for it."""

    reading: PartialReading
    field_count: int


class FieldGenerator:
    """Draws a single measurement uniformly from its field's range."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def generate(self, field: SensorField) -> float:
        low, high = FIELD_RANGES[field]
        return low + self._rng.random() * (high - low)


class ReadingComposer:
    """Chooses which measurements a cycle reports and builds the reading.

    The number of fields is drawn uniformly from 1-3. With one field, that
    field is picked uniformly; with two, the excluded field is picked
    uniformly and the remaining two are generated in declaration order.
    """

    def __init__(
        self,
        sensor_name: str,
        location: str,
        rng: random.Random,
        generator: FieldGenerator | None = None,
    ) -> None:
        self.sensor_name = sensor_name
        self.location = location
        self._rng = rng
        self._generator = generator or FieldGenerator(rng)

    def compose(self) -> ComposedReading:
        field_count = self._rng.randint(1, 3)

        if field_count == 1:
            selected = (self._rng.choice(_FIELDS),)
        elif field_count == 2:
            excluded = self._rng.choice(_FIELDS)
            selected = tuple(field for field in _FIELDS if field is not excluded)
        else:
            selected = _FIELDS

        values: Dict[str, float] = {
            field.value: self._generator.generate(field) for field in selected
        }
        reading = PartialReading(
            sensor_name=self.sensor_name,
            location=self.location,
            **values,
        )
        return ComposedReading(reading=reading, field_count=field_count)
