"""Retry strategies: infinite iterators of delays between attempts.

Combine them with ``itertools.islice`` to limit the number of retries, with
:func:`retryflow.limits.max_interval` to bound total time, or with
:func:`retryflow.limits.jitter` through ``map`` to randomise delays.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

__all__ = [
    "ExponentialBackoff",
    "ExponentialFactorBackoff",
    "FibonacciBackoff",
    "FixedInterval",
]

_U64_MAX = 2**64 - 1
_U32_MAX = 2**32 - 1
_TIMEDELTA_MAX_MILLIS = timedelta.max // timedelta(milliseconds=1)


def _check_millis(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer number of milliseconds, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _from_millis(millis: int) -> timedelta:
    """Convert milliseconds to a timedelta, saturating at ``timedelta.max``."""
    if millis > _TIMEDELTA_MAX_MILLIS:
        return timedelta.max
    return timedelta(milliseconds=millis)


def _saturating_mul(a: int, b: int) -> int:
    return min(a * b, _U64_MAX)


class ExponentialBackoff:
    """Exponential back-off: the base raised to the number of past attempts, in milliseconds."""

    def __init__(self, base: int) -> None:
        base = _check_millis("base", base)
        self._current = base
        self._base = base
        self._factor = 1
        self._max_delay: Optional[timedelta] = None

    @classmethod
    def from_millis(cls, base: int) -> "ExponentialBackoff":
        """Create a strategy whose n-th delay is ``base ** n`` milliseconds."""
        return cls(base)

    def factor(self, factor: int) -> "ExponentialBackoff":
        """Multiply every delay by ``factor`` (``1000`` gives delays in seconds)."""
        self._factor = _check_millis("factor", factor)
        return self

    def max_delay(self, duration: timedelta) -> "ExponentialBackoff":
        """No single delay will be longer than ``duration``."""
        self._max_delay = duration
        return self

    def max_delay_millis(self, millis: int) -> "ExponentialBackoff":
        """No single delay will be longer than ``millis`` milliseconds."""
        self._max_delay = _from_millis(_check_millis("millis", millis))
        return self

    def __iter__(self) -> "ExponentialBackoff":
        return self

    def __next__(self) -> timedelta:
        duration = _from_millis(_saturating_mul(self._current, self._factor))
        if self._max_delay is not None and duration > self._max_delay:
            return self._max_delay
        self._current = _saturating_mul(self._current, self._base)
        return duration

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoff(current={self._current}, base={self._base}, "
            f"factor={self._factor}, max_delay={self._max_delay!r})"
        )


class ExponentialFactorBackoff:
    """Back-off where a base factor raised to the attempt count scales an initial delay.

    Delays are capped at ``2**32 - 1`` milliseconds (about 49 days).
    """

    def __init__(self, initial_delay: int, base_factor: float) -> None:
        self._base = _check_millis("initial_delay", initial_delay)
        self._factor = 1.0
        self._base_factor = float(base_factor)
        self._max_delay: Optional[timedelta] = None

    @classmethod
    def from_millis(cls, initial_delay: int, base_factor: float) -> "ExponentialFactorBackoff":
        """Create a strategy whose n-th delay is ``initial_delay * base_factor ** n`` ms."""
        return cls(initial_delay, base_factor)

    @classmethod
    def from_factor(cls, base_factor: float) -> "ExponentialFactorBackoff":
        """Create a strategy with an initial delay of 500 milliseconds."""
        return cls(500, base_factor)

    def initial_delay(self, initial_delay: int) -> "ExponentialFactorBackoff":
        """Set the initial delay in milliseconds."""
        self._base = _check_millis("initial_delay", initial_delay)
        return self

    def max_delay(self, duration: timedelta) -> "ExponentialFactorBackoff":
        """No single delay will be longer than ``duration``."""
        self._max_delay = duration
        return self

    def max_delay_millis(self, millis: int) -> "ExponentialFactorBackoff":
        """No single delay will be longer than ``millis`` milliseconds."""
        self._max_delay = _from_millis(_check_millis("millis", millis))
        return self

    def __iter__(self) -> "ExponentialFactorBackoff":
        return self

    def __next__(self) -> timedelta:
        millis = self._base * self._factor
        if millis > _U32_MAX:
            duration = _from_millis(_U32_MAX)
        elif millis != millis or millis <= 0:
            duration = timedelta(0)
        else:
            duration = _from_millis(int(millis))
        if self._max_delay is not None and duration > self._max_delay:
            return self._max_delay
        self._factor *= self._base_factor
        return duration

    def __repr__(self) -> str:
        return (
            f"ExponentialFactorBackoff(base={self._base}, factor={self._factor}, "
            f"base_factor={self._base_factor}, max_delay={self._max_delay!r})"
        )


class FibonacciBackoff:
    """Back-off where each delay is the sum of the two previous ones."""

    def __init__(self, millis: int) -> None:
        millis = _check_millis("millis", millis)
        self._current = millis
        self._next = millis
        self._factor = 1
        self._max_delay: Optional[timedelta] = None

    @classmethod
    def from_millis(cls, millis: int) -> "FibonacciBackoff":
        """Create a strategy starting at ``millis`` milliseconds."""
        return cls(millis)

    def factor(self, factor: int) -> "FibonacciBackoff":
        """Multiply every delay by ``factor`` (``1000`` gives delays in seconds)."""
        self._factor = _check_millis("factor", factor)
        return self

    def max_delay(self, duration: timedelta) -> "FibonacciBackoff":
        """No single delay will be longer than ``duration``."""
        self._max_delay = duration
        return self

    def max_delay_millis(self, millis: int) -> "FibonacciBackoff":
        """No single delay will be longer than ``millis`` milliseconds."""
        self._max_delay = _from_millis(_check_millis("millis", millis))
        return self

    def __iter__(self) -> "FibonacciBackoff":
        return self

    def __next__(self) -> timedelta:
        duration = _from_millis(_saturating_mul(self._current, self._factor))
        if self._max_delay is not None and duration > self._max_delay:
            return self._max_delay
        self._current, self._next = self._next, min(self._current + self._next, _U64_MAX)
        return duration

    def __repr__(self) -> str:
        return (
            f"FibonacciBackoff(current={self._current}, next={self._next}, "
            f"factor={self._factor}, max_delay={self._max_delay!r})"
        )


class FixedInterval:
    """A strategy that always yields the same delay."""

    def __init__(self, duration: timedelta) -> None:
        self.duration = duration

    @classmethod
    def from_millis(cls, millis: int) -> "FixedInterval":
        """Create a strategy with a constant delay of ``millis`` milliseconds."""
        return cls(_from_millis(_check_millis("millis", millis)))

    def __iter__(self) -> "FixedInterval":
        return self

    def __next__(self) -> timedelta:
        return self.duration

    def __repr__(self) -> str:
        return f"FixedInterval({self.duration!r})"