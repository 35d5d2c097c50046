"""Unit tests for the JSON payload encoder."""

from __future__ import annotations

import json
import random

import pytest

from models.records import PartialReading
from services.encoder import decode, describe, encode
from services.generator import ReadingComposer


def test_single_field_reading_encodes_exactly() -> None:
    reading = PartialReading(sensor_name="S1", location="Lab", temperature=22.3)

    assert encode(reading) == b'{"name":"S1","location":"Lab","temperature":22.3}'


def test_absent_fields_are_omitted_not_null() -> None:
    reading = PartialReading(sensor_name="S1", location="Lab", humidity=55.0, pressure=1001.25)

    body = json.loads(encode(reading))

    assert set(body) == {"name", "location", "humidity", "pressure"}
    assert "temperature" not in body
    assert b"null" not in encode(reading)


def test_full_precision_is_kept_on_the_wire() -> None:
    value = 22.123456789012345
    reading = PartialReading(sensor_name="S1", location="Lab", temperature=value)

    assert json.loads(encode(reading))["temperature"] == value


def test_strings_are_escaped() -> None:
    reading = PartialReading(sensor_name='Sensor "7"', location="Lab\\North\n", pressure=990.5)

    body = json.loads(encode(reading))

    assert body["name"] == 'Sensor "7"'
    assert body["location"] == "Lab\\North\n"


def test_round_trip_preserves_values_and_absence() -> None:
    composer = ReadingComposer(sensor_name="S1", location="Lab", rng=random.Random(17))

    for _ in range(200):
        reading = composer.compose().reading
        decoded = decode(encode(reading))

        assert decoded.sensor_name == reading.sensor_name
        assert decoded.location == reading.location
        assert [field for field, _ in decoded.present_fields()] == [
            field for field, _ in reading.present_fields()
        ]
        for (_, original), (_, restored) in zip(reading.present_fields(), decoded.present_fields()):
            assert restored == pytest.approx(original)


def test_describe_rounds_for_display() -> None:
    reading = PartialReading(
        sensor_name="S1",
        location="Lab",
        temperature=22.3,
        humidity=45.127,
        pressure=1013.0,
    )

    assert describe(reading) == "Temperature=22.30°C, Humidity=45.13%, Pressure=1013.00 hPa"
