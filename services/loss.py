"""Simulated transmission loss."""

from __future__ import annotations

import random


def should_drop(probability: float, rng: random.Random) -> bool:
    return rng.random() < probability


class LossDecider:
    """Independent Bernoulli trial per cycle; no memory of earlier drops."""

    def __init__(self, probability: float, rng: random.Random) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"Drop probability must be within [0, 1], got {probability}.")
        self.probability = probability
        self._rng = rng

    def should_drop(self) -> bool:
        return should_drop(self.probability, self._rng)
