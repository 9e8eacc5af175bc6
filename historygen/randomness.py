import random
import string
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class RandomSource:
    """
    Single source of randomness for a run.
    Pass a seed to make schedules and message picks reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def uniform_int(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both inclusive."""
        return self._rng.randint(low, high)

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        """k distinct elements of ``items``, without replacement."""
        return self._rng.sample(list(items), k)

    def uniform_real(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def token(self, length: int) -> str:
        return "".join(self._rng.choice(_TOKEN_ALPHABET) for _ in range(length))
