"""Unit tests for field generation and reading composition."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from models.records import FIELD_RANGES, PartialReading, SensorField
from services.generator import FieldGenerator, ReadingComposer

SAMPLES = 10_000


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


def _composer(seed: int = 7) -> ReadingComposer:
    return ReadingComposer(sensor_name="S1", location="Lab", rng=random.Random(seed))


def test_present_field_count_matches_recorded_field_count() -> None:
    composer = _composer()

    for _ in range(SAMPLES):
        composed = composer.compose()
        assert composed.field_count in {1, 2, 3}
        assert composed.reading.field_count == composed.field_count


def test_generated_values_stay_within_ranges() -> None:
    composer = _composer(seed=11)
    seen = Counter()

    for _ in range(SAMPLES):
        reading = composer.compose().reading
        for field, value in reading.present_fields():
            low, high = FIELD_RANGES[field]
            assert low <= value < high
            seen[field] += 1

    assert set(seen) == set(SensorField)


def test_every_field_count_and_subset_occurs() -> None:
    composer = _composer(seed=3)
    counts = Counter()
    subsets = set()

    for _ in range(SAMPLES):
        composed = composer.compose()
        counts[composed.field_count] += 1
        subsets.add(tuple(field for field, _ in composed.reading.present_fields()))

    assert set(counts) == {1, 2, 3}
    for field_count in (1, 2, 3):
        assert counts[field_count] / SAMPLES == pytest.approx(1 / 3, abs=0.03)
    # 3 single-field, 3 two-field and 1 three-field combinations
    assert len(subsets) == 7


def test_sensor_identity_is_constant() -> None:
    composer = _composer()

    readings = [composer.compose().reading for _ in range(50)]

    assert {reading.sensor_name for reading in readings} == {"S1"}
    assert {reading.location for reading in readings} == {"Lab"}


@pytest.mark.parametrize("field", list(SensorField))
def test_field_generator_maps_unit_interval_onto_range(field: SensorField) -> None:
    low, high = FIELD_RANGES[field]

    assert FieldGenerator(FixedRandom(0.0)).generate(field) == low
    top = FieldGenerator(FixedRandom(0.999999)).generate(field)
    assert low < top < high


def test_seeded_composers_are_reproducible() -> None:
    first_composer = _composer(seed=42)
    second_composer = _composer(seed=42)

    first = [first_composer.compose() for _ in range(20)]
    second = [second_composer.compose() for _ in range(20)]

    assert first == second


def test_partial_reading_reports_absent_fields_as_missing() -> None:
    reading = PartialReading(sensor_name="S1", location="Lab", humidity=41.5)

    assert reading.present_fields() == [(SensorField.humidity, 41.5)]
    assert reading.value_of(SensorField.temperature) is None
    assert reading.field_count == 1
