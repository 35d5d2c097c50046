from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

import typer

from settings import Settings, get_settings


def _normalize_log_level(value: str) -> str:
    candidate = value.strip().upper()
    if not isinstance(logging.getLevelName(candidate), int):
        raise typer.BadParameter(
            f"Unknown log level {value!r}; use DEBUG, INFO, WARNING, ERROR or CRITICAL.",
            param_hint="--log-level",
        )
    return candidate


def load_config(
    endpoint_url: Optional[str] = None,
    sensor_name: Optional[str] = None,
    location: Optional[str] = None,
    base_interval: Optional[int] = None,
    jitter: Optional[int] = None,
    drop_probability: Optional[float] = None,
    request_timeout: Optional[float] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """Overlay command line options on the environment-derived settings.

    An inherited jitter larger than an overridden base interval is clamped
    to it; only an explicit ``jitter`` can conflict with ``base_interval``.
    """
    settings = get_settings()
    if base_interval is not None and jitter is None and settings.jitter > base_interval:
        jitter = base_interval

    overrides: dict[str, Any] = {
        "endpoint_url": endpoint_url.strip() if endpoint_url else None,
        "sensor_name": sensor_name.strip() if sensor_name else None,
        "location": location.strip() if location else None,
        "base_interval": base_interval,
        "jitter": jitter,
        "drop_probability": drop_probability,
        "request_timeout": request_timeout,
        "log_level": _normalize_log_level(log_level) if log_level else None,
    }
    applied = {key: value for key, value in overrides.items() if value not in (None, "")}
    return replace(settings, **applied)
