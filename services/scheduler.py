"""Jittered wait scheduling between simulation cycles."""

from __future__ import annotations

import random
import threading


def next_interval(base: int, jitter: int, rng: random.Random) -> int:
    """Return whole seconds drawn uniformly from ``[base - jitter, base + jitter]``."""
    return rng.randint(base - jitter, base + jitter)


class IntervalScheduler:

    def __init__(self, base: int, jitter: int, rng: random.Random) -> None:
        if jitter < 0:
            raise ValueError(f"Jitter must not be negative, got {jitter}.")
        if jitter > base:
            raise ValueError(
                f"Jitter ({jitter}s) must not exceed the base interval ({base}s)."
            )
        self.base = base
        self.jitter = jitter
        self._rng = rng

    def next_interval(self) -> int:
        return next_interval(self.base, self.jitter, self._rng)

    def wait(self, seconds: float, stop_event: threading.Event) -> bool:
        """Block for ``seconds`` or until ``stop_event`` is set.

        Returns ``True`` when the wait was cut short by a stop request.
        """
        if stop_event.is_set():
            return True
        return stop_event.wait(timeout=seconds)
