import random
from typing import Optional


class RandomFieldGenerator:
    """
    Source of synthetic row values.

    Seeded once at construction; pass ``seed`` for reproducible datasets.
    Not thread-safe, keep one instance per producing thread.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def gen_float(self, min_value: float, max_value: float) -> float:
        return min_value + self._rng.random() * (max_value - min_value)

    def gen_int(self, min_value: int, max_value: int) -> int:
        # both bounds inclusive
        return self._rng.randint(min_value, max_value)

    def gen_2_percent_bool(self) -> bool:
        return self.gen_chance(2)

    def gen_chance(self, percent: int) -> bool:
        return self._rng.randrange(100) < percent
