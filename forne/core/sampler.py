"""
Weighted random selection of the next card.

Each candidate is drawn with probability weight / sum(weights). Candidates
with zero weight are never drawn, and when nothing has any weight left the
sampler reports the pass as exhausted instead of drawing.
"""

from __future__ import annotations

import math
import random
from collections.abc import Hashable, Iterable
from typing import TypeVar

from loguru import logger

K = TypeVar("K", bound=Hashable)


class Exhausted(Exception):
    """Every candidate weight is zero (or there are no candidates)."""


class WeightedSampler:
    """Draws ids in proportion to their weights."""

    def __init__(self, rng: random.Random | None = None):
        """
        Initialize the sampler.

        Args:
            rng: Source of randomness (a fresh unseeded Random if None)
        """
        self.rng = rng or random.Random()

    def draw(self, candidates: Iterable[tuple[K, float]]) -> K:
        """
        Draw one id from (id, weight) pairs.

        Weights are consumed eagerly, so an error raised while computing one
        propagates before anything is drawn.

        Raises:
            Exhausted: If no candidate has a nonzero weight.
            ValueError: If a weight is negative, NaN or infinite.
        """
        ids: list[K] = []
        weights: list[float] = []
        for item_id, weight in candidates:
            if not math.isfinite(weight) or weight < 0:
                raise ValueError(f"invalid weight {weight!r} for {item_id!r}")
            if weight == 0:
                continue
            ids.append(item_id)
            weights.append(weight)

        if not ids:
            raise Exhausted()

        # Scaled to at most 1 each so the total stays finite
        largest = max(weights)
        scaled = [weight / largest for weight in weights]
        chosen = self.rng.choices(ids, weights=scaled, k=1)[0]
        logger.debug(f"Drew {chosen} from {len(ids)} weighted candidate(s)")
        return chosen
