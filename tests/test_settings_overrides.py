from __future__ import annotations

import pytest
import typer

from cli.config import load_config
from services.simulator import build_simulator
from settings import get_settings

_ENV_NAMES = (
    "SIMULATOR_ENDPOINT_URL",
    "SIMULATOR_SENSOR_NAME",
    "SIMULATOR_LOCATION",
    "SIMULATOR_BASE_INTERVAL",
    "SIMULATOR_JITTER",
    "SIMULATOR_DROP_PROBABILITY",
    "SIMULATOR_REQUEST_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = get_settings()

    assert settings.endpoint_url == "http://localhost:8080/api/sensors"
    assert settings.sensor_name == "Sensor-Simulator-Python"
    assert settings.location == "Test-Lab"
    assert (settings.base_interval, settings.jitter) == (30, 10)
    assert settings.drop_probability == 0.1
    assert settings.request_timeout == 10.0
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("SIMULATOR_ENDPOINT_URL", "http://ingest.test/readings")
    monkeypatch.setenv("SIMULATOR_SENSOR_NAME", " Roof-1 ")
    monkeypatch.setenv("SIMULATOR_LOCATION", "Roof")
    monkeypatch.setenv("SIMULATOR_BASE_INTERVAL", "5")
    monkeypatch.setenv("SIMULATOR_JITTER", "2")
    monkeypatch.setenv("SIMULATOR_DROP_PROBABILITY", "0.25")
    monkeypatch.setenv("SIMULATOR_REQUEST_TIMEOUT", "3.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    simulator = build_simulator(seed=1)

    try:
        assert settings.sensor_name == "Roof-1"
        assert settings.log_level == "DEBUG"
        assert simulator.sensor_name == "Roof-1"
        assert simulator.composer.location == "Roof"
        assert simulator.client.endpoint_url == "http://ingest.test/readings"
        assert simulator.client.timeout == 3.5
        assert simulator.loss.probability == 0.25
        assert (simulator.scheduler.base, simulator.scheduler.jitter) == (5, 2)
    finally:
        simulator.close()


@pytest.mark.parametrize(
    "name,value",
    [
        ("SIMULATOR_BASE_INTERVAL", "soon"),
        ("SIMULATOR_BASE_INTERVAL", "0"),
        ("SIMULATOR_JITTER", "-3"),
        ("SIMULATOR_DROP_PROBABILITY", "1.5"),
        ("SIMULATOR_REQUEST_TIMEOUT", "-1"),
        ("SIMULATOR_SENSOR_NAME", "   "),
    ],
)
def test_invalid_values_fall_back_to_defaults(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    settings = get_settings()

    assert settings.base_interval == 30
    assert settings.jitter == 10
    assert settings.drop_probability == 0.1
    assert settings.request_timeout == 10.0
    assert settings.sensor_name == "Sensor-Simulator-Python"


def test_jitter_is_clamped_to_base_interval(monkeypatch) -> None:
    monkeypatch.setenv("SIMULATOR_BASE_INTERVAL", "4")
    monkeypatch.setenv("SIMULATOR_JITTER", "20")

    settings = get_settings()

    assert (settings.base_interval, settings.jitter) == (4, 4)


def test_cli_options_override_environment(monkeypatch) -> None:
    monkeypatch.setenv("SIMULATOR_SENSOR_NAME", "from-env")
    monkeypatch.setenv("SIMULATOR_DROP_PROBABILITY", "0.5")

    settings = load_config(sensor_name="from-cli", drop_probability=0.0, log_level="warning")

    assert settings.sensor_name == "from-cli"
    assert settings.drop_probability == 0.0
    assert settings.log_level == "WARNING"
    assert settings.location == "Test-Lab"


def test_interval_override_clamps_inherited_jitter() -> None:
    settings = load_config(base_interval=5)

    assert (settings.base_interval, settings.jitter) == (5, 5)


def test_explicit_jitter_is_kept_even_when_conflicting() -> None:
    settings = load_config(base_interval=5, jitter=10)

    assert (settings.base_interval, settings.jitter) == (5, 10)


def test_unknown_cli_log_level_is_rejected() -> None:
    with pytest.raises(typer.BadParameter):
        load_config(log_level="loud")


def test_unknown_env_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "loud")

    assert get_settings().log_level == "INFO"
