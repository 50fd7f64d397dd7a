"""
RNG - Uniform Shape Queue
=========================

Provides seedable, uniform shape selection with a one-piece preview.
"""

from __future__ import annotations

import random
from typing import List, Optional

from jointris.core.shapes import ShapeKind, random_kind


class ShapeQueue:
    """
    Uniform random queue of shape kinds.

    Every draw is independent and uniform over the seven kinds. The next
    kind is drawn one step ahead so it can be previewed.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize shape queue.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._rng = random.Random(seed)
        self._next: ShapeKind = random_kind(self._rng)

    @property
    def next_kind(self) -> ShapeKind:
        """Kind of the piece that will spawn next."""
        return self._next

    def advance(self) -> ShapeKind:
        """
        Consume the next kind and draw a new one.

        Returns:
            The kind that was next (now consumed).
        """
        consumed = self._next
        self._next = random_kind(self._rng)
        return consumed

    def peek(self, count: int = 1) -> List[ShapeKind]:
        """
        Peek at upcoming kinds without consuming.

        Only the first kind is committed; later ones come from a copy of
        the generator state and match what advance() will produce.
        """
        result = [self._next]
        shadow = random.Random()
        shadow.setstate(self._rng.getstate())
        for _ in range(count - 1):
            result.append(random_kind(shadow))
        return result[:count]

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the queue with optional new seed.

        Args:
            seed: New random seed. Keeps current generator if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._next = random_kind(self._rng)
