from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


DEFAULT_ENDPOINT_URL = "http://localhost:8080/api/sensors"
DEFAULT_SENSOR_NAME = "Sensor-Simulator-Python"
DEFAULT_LOCATION = "Test-Lab"
DEFAULT_BASE_INTERVAL = 30
DEFAULT_JITTER = 10
DEFAULT_DROP_PROBABILITY = 0.1
DEFAULT_REQUEST_TIMEOUT = 10.0

_ENDPOINT_URL_ENV = "SIMULATOR_ENDPOINT_URL"
_SENSOR_NAME_ENV = "SIMULATOR_SENSOR_NAME"
_LOCATION_ENV = "SIMULATOR_LOCATION"
_BASE_INTERVAL_ENV = "SIMULATOR_BASE_INTERVAL"
_JITTER_ENV = "SIMULATOR_JITTER"
_DROP_PROBABILITY_ENV = "SIMULATOR_DROP_PROBABILITY"
_REQUEST_TIMEOUT_ENV = "SIMULATOR_REQUEST_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    endpoint_url: str
    sensor_name: str
    location: str
    base_interval: int
    jitter: int
    drop_probability: float
    request_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_raw_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_int_env(name: str, default: int, minimum: int = 0) -> int:
    candidate = _read_raw_env(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _read_probability_env(name: str, default: float) -> float:
    candidate = _read_raw_env(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if 0.0 <= parsed <= 1.0 else default


def _read_timeout_env(name: str, default: float) -> float:
    candidate = _read_raw_env(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    candidate = _read_raw_env(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    level = candidate.upper()
    return level if isinstance(logging.getLevelName(level), int) else default


@lru_cache
def get_settings() -> Settings:
    base_interval = _read_int_env(_BASE_INTERVAL_ENV, DEFAULT_BASE_INTERVAL, minimum=1)
    jitter = _read_int_env(_JITTER_ENV, DEFAULT_JITTER)
    if jitter > base_interval:
        jitter = min(DEFAULT_JITTER, base_interval)
    return Settings(
        endpoint_url=_read_str_env(_ENDPOINT_URL_ENV, DEFAULT_ENDPOINT_URL),
        sensor_name=_read_str_env(_SENSOR_NAME_ENV, DEFAULT_SENSOR_NAME),
        location=_read_str_env(_LOCATION_ENV, DEFAULT_LOCATION),
        base_interval=base_interval,
        jitter=jitter,
        drop_probability=_read_probability_env(_DROP_PROBABILITY_ENV, DEFAULT_DROP_PROBABILITY),
        request_timeout=_read_timeout_env(_REQUEST_TIMEOUT_ENV, DEFAULT_REQUEST_TIMEOUT),
        log_level=_read_log_level("INFO"),
    )
