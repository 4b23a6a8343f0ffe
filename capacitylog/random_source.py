"""Random source capability used by the simulator.

The simulator never touches the ``random`` module's global generator. It asks
an injected source for uniform floats and derives every other draw from those
floats, so a fake source that returns fixed values drives the whole walk
deterministically.

Any object with a ``random() -> float`` method in ``[0, 1)`` qualifies,
including ``random.Random`` instances.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Capability interface: next uniform float in ``[0, 1)``."""

    def random(self) -> float:
        ...


def default_source(seed: Optional[int] = None) -> random.Random:
    """Return a fresh, unshared generator (seeded when ``seed`` is given)."""

    return random.Random(seed)


def centered(rng: RandomSource, spread: float) -> float:
    """Draw uniformly from ``[-spread / 2, spread / 2)``."""

    return (rng.random() - 0.5) * spread


def randint_span(rng: RandomSource, low: int, count: int) -> int:
    """Draw an integer uniformly from ``low .. low + count - 1``."""

    return low + math.floor(rng.random() * count)


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one element uniformly from a non-empty sequence."""

    if not items:
        raise ValueError("cannot pick from an empty sequence")
    index = math.floor(rng.random() * len(items))
    # Guard against sources that return exactly 1.0.
    return items[min(index, len(items) - 1)]


class FixedSource:
    """Random source that replays a fixed sequence of values.

    Values are returned in order; once exhausted the last value repeats.
    ``FixedSource(0.5)`` is the midpoint source: every draw returns 0.5.
    """

    def __init__(self, *values: float) -> None:
        if not values:
            raise ValueError("FixedSource needs at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"value {value!r} outside [0, 1)")
        self._values = list(values)
        self._index = 0
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._index < len(self._values):
            value = self._values[self._index]
            self._index += 1
            return value
        return self._values[-1]
