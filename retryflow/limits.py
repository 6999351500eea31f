"""Jitter functions and a wrapper bounding how long a strategy keeps retrying."""

from __future__ import annotations

import random
import time
from datetime import timedelta
from typing import Callable, Iterable, Iterator


def jitter(duration: timedelta) -> timedelta:
    """Scale ``duration`` by a random factor between 50% and 150%."""
    return duration * (random.random() + 0.5)


def jitter_range(min_factor: float, max_factor: float) -> Callable[[timedelta], timedelta]:
    """Return a function scaling a duration by a random factor in ``[min_factor, max_factor)``."""

    def apply(duration: timedelta) -> timedelta:
        return duration * (random.random() * (max_factor - min_factor) + min_factor)

    return apply


class MaxIntervalIterator:
    """Yields the delays of a strategy until ``max_duration`` has passed since creation."""

    def __init__(self, strategy: Iterable[timedelta], max_duration: timedelta) -> None:
        self._iter: Iterator[timedelta] = iter(strategy)
        self._start = time.monotonic()
        self.max_duration = max_duration

    def __iter__(self) -> "MaxIntervalIterator":
        return self

    def __next__(self) -> timedelta:
        elapsed = timedelta(seconds=time.monotonic() - self._start)
        if elapsed > self.max_duration:
            raise StopIteration
        return next(self._iter)

    def __repr__(self) -> str:
        return f"MaxIntervalIterator(max_duration={self.max_duration!r})"


def max_interval(strategy: Iterable[timedelta], millis: int) -> MaxIntervalIterator:
    """Stop ``strategy`` once ``millis`` milliseconds have passed from now."""
    return MaxIntervalIterator(strategy, timedelta(milliseconds=millis))


def max_duration(strategy: Iterable[timedelta], duration: timedelta) -> MaxIntervalIterator:
    """Stop ``strategy`` once ``duration`` has passed from now."""
    return MaxIntervalIterator(strategy, duration)