"""Simulation loop: wait, maybe drop, generate, encode, deliver, repeat."""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from models.records import PartialReading
from services.delivery import (
    DeliveryClient,
    DeliveryOutcome,
    DeliverySuccess,
    TransportError,
    UnexpectedStatus,
)
from services.encoder import describe, encode
from services.generator import ReadingComposer
from services.loss import LossDecider
from services.scheduler import IntervalScheduler
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CycleStatus(str, Enum):
    """How a single cycle ended."""

    delivered = "delivered"
    dropped = "dropped"
    warning = "warning"
    error = "error"
    stopped = "stopped"


@dataclass(frozen=True)
class CycleResult:
    cycle: int
    status: CycleStatus
    wait_seconds: Optional[int] = None
    reading: Optional[PartialReading] = None
    field_count: Optional[int] = None
    outcome: Optional[DeliveryOutcome] = None
    error: Optional[Exception] = None


class SensorSimulator:
    """Drives one simulated sensor until a stop is requested.

    Every cycle ends in a ``CycleResult``. Only ``CycleStatus.stopped`` ends
    the loop; delivery failures and unexpected exceptions are logged and the
    next cycle is scheduled as usual.
    """

    def __init__(
        self,
        composer: ReadingComposer,
        loss: LossDecider,
        scheduler: IntervalScheduler,
        client: DeliveryClient,
    ) -> None:
        self.composer = composer
        self.loss = loss
        self.scheduler = scheduler
        self.client = client

    @property
    def sensor_name(self) -> str:
        return self.composer.sensor_name

    def run(self, stop_event: threading.Event) -> int:
        """Run cycles until ``stop_event`` is set; return the completed cycle count."""
        completed = 0
        cycle = 0
        while True:
            cycle += 1
            result = self.run_cycle(cycle, stop_event)
            if result.status is CycleStatus.stopped:
                break
            completed += 1
        logger.info(
            "Simulation stopped after %d completed cycles",
            completed,
            extra={"sensor": self.sensor_name},
        )
        return completed

    def run_cycle(self, cycle: int, stop_event: threading.Event) -> CycleResult:
        context = self._context(cycle)
        logger.info("Cycle %d starting", cycle, extra=context)

        wait_seconds = self.scheduler.next_interval()
        logger.info("Waiting %d seconds", wait_seconds, extra={**context, "wait_seconds": wait_seconds})
        if self.scheduler.wait(wait_seconds, stop_event):
            logger.info("Stop requested while waiting", extra=context)
            return CycleResult(cycle=cycle, status=CycleStatus.stopped, wait_seconds=wait_seconds)

        if self.loss.should_drop():
            logger.info("Packet loss, skipping transmission", extra=context)
            return CycleResult(cycle=cycle, status=CycleStatus.dropped, wait_seconds=wait_seconds)

        return self._transmit_guarded(cycle, wait_seconds)

    def send_now(self, cycle: int = 1, allow_drop: bool = False) -> CycleResult:
        """Run a single cycle immediately, skipping the wait."""
        if allow_drop and self.loss.should_drop():
            logger.info("Packet loss, skipping transmission", extra=self._context(cycle))
            return CycleResult(cycle=cycle, status=CycleStatus.dropped)
        return self._transmit_guarded(cycle, None)

    def close(self) -> None:
        self.client.close()

    def _transmit_guarded(self, cycle: int, wait_seconds: Optional[int]) -> CycleResult:
        try:
            return self._transmit(cycle, wait_seconds)
        except Exception as exc:  # noqa: BLE001 - cycle boundary
            logger.exception(
                "Cycle %d failed: %s",
                cycle,
                exc,
                extra={**self._context(cycle), "reason": type(exc).__name__},
            )
            return CycleResult(
                cycle=cycle,
                status=CycleStatus.error,
                wait_seconds=wait_seconds,
                error=exc,
            )

    def _transmit(self, cycle: int, wait_seconds: Optional[int]) -> CycleResult:
        context = self._context(cycle)
        composed = self.composer.compose()
        reading = composed.reading
        logger.info(
            "Generated data: %s",
            describe(reading),
            extra={**context, "field_count": composed.field_count},
        )

        payload = encode(reading)
        outcome = self.client.deliver(payload)

        result = CycleResult(
            cycle=cycle,
            status=CycleStatus.delivered,
            wait_seconds=wait_seconds,
            reading=reading,
            field_count=composed.field_count,
            outcome=outcome,
        )
        if isinstance(outcome, DeliverySuccess):
            logger.info("Data sent to %s", self.client.endpoint_url, extra=context)
            return result
        if isinstance(outcome, UnexpectedStatus):
            logger.warning(
                "Endpoint returned status %d",
                outcome.status_code,
                extra={**context, "status_code": outcome.status_code, "reason": outcome.detail},
            )
            return replace(result, status=CycleStatus.warning)
        if isinstance(outcome, TransportError):
            logger.error(
                "Delivery failed: %s",
                outcome.reason,
                extra={**context, "reason": type(outcome.cause).__name__},
            )
            return replace(result, status=CycleStatus.error)
        raise TypeError(f"Unknown delivery outcome {outcome!r}")

    def _context(self, cycle: int) -> Dict[str, Any]:
        return {"sensor": self.sensor_name, "cycle": cycle}


def build_simulator(
    settings: Optional[Settings] = None,
    *,
    seed: Optional[int] = None,
    sensor_name: Optional[str] = None,
) -> SensorSimulator:
    """Factory that wires a simulator from settings with a private random source."""
    settings = settings or get_settings()
    rng = random.Random(seed)
    composer = ReadingComposer(
        sensor_name=sensor_name or settings.sensor_name,
        location=settings.location,
        rng=rng,
    )
    return SensorSimulator(
        composer=composer,
        loss=LossDecider(settings.drop_probability, rng),
        scheduler=IntervalScheduler(settings.base_interval, settings.jitter, rng),
        client=DeliveryClient(settings.endpoint_url, timeout=settings.request_timeout),
    )


def build_simulators(
    count: int,
    settings: Optional[Settings] = None,
    seed: Optional[int] = None,
) -> list[SensorSimulator]:
    """Build ``count`` independent simulators; names get a ``-N`` suffix when count > 1."""
    if count < 1:
        raise ValueError(f"Sensor count must be at least 1, got {count}.")
    settings = settings or get_settings()
    if count == 1:
        return [build_simulator(settings, seed=seed)]
    return [
        build_simulator(
            settings,
            seed=None if seed is None else seed + index,
            sensor_name=f"{settings.sensor_name}-{index + 1}",
        )
        for index in range(count)
    ]


def run_simulators(
    simulators: Sequence[SensorSimulator],
    stop_event: threading.Event,
) -> Dict[str, int]:
    """Run each simulator on its own worker thread until ``stop_event`` is set."""
    with ThreadPoolExecutor(
        max_workers=max(len(simulators), 1),
        thread_name_prefix="sensor",
    ) as executor:
        futures = {
            simulator.sensor_name: executor.submit(simulator.run, stop_event)
            for simulator in simulators
        }
        return {name: future.result() for name, future in futures.items()}
