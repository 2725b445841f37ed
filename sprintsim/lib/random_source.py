"""
Seedable random source.

Every draw in the simulation (contract generation, candidates, the
disruption roll, entity ids) goes through one RandomSource so a seeded
run replays exactly.
"""

import random
import uuid
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """Thin wrapper over an isolated random.Random instance."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both inclusive."""
        return self._random.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        return self._random.uniform(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._random.choice(seq)

    def chance(self, probability: float) -> bool:
        """True with the given probability. Out-of-range values are clamped."""
        return self.random() < min(1.0, max(0.0, probability))

    def new_id(self, prefix: str = "") -> str:
        """Deterministic UUID4-shaped id drawn from this source."""
        value = str(uuid.UUID(int=self._random.getrandbits(128), version=4))
        return f"{prefix}-{value}" if prefix else value
