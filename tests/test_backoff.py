from datetime import timedelta
from itertools import islice

import pytest

from retryflow.backoff import (
    ExponentialBackoff,
    ExponentialFactorBackoff,
    FibonacciBackoff,
    FixedInterval,
)

U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1


def ms(value):
    return timedelta(milliseconds=value)


def take(strategy, count):
    return list(islice(strategy, count))


# ExponentialBackoff


def test_exponential_base_10():
    s = ExponentialBackoff.from_millis(10)
    assert take(s, 3) == [ms(10), ms(100), ms(1000)]


def test_exponential_base_2():
    s = ExponentialBackoff.from_millis(2)
    assert take(s, 3) == [ms(2), ms(4), ms(8)]


def test_exponential_saturates_at_maximum_value():
    s = ExponentialBackoff.from_millis(U64_MAX - 1)
    assert take(s, 3) == [timedelta.max, timedelta.max, timedelta.max]


def test_exponential_factor_gives_seconds():
    s = ExponentialBackoff.from_millis(2).factor(1000)
    assert take(s, 3) == [timedelta(seconds=2), timedelta(seconds=4), timedelta(seconds=8)]


def test_exponential_stops_increasing_at_max_delay():
    s = ExponentialBackoff.from_millis(2).max_delay(ms(4))
    assert take(s, 3) == [ms(2), ms(4), ms(4)]


def test_exponential_returns_max_when_max_less_than_base():
    s = ExponentialBackoff.from_millis(20).max_delay(ms(10))
    assert take(s, 2) == [ms(10), ms(10)]


def test_exponential_max_delay_millis():
    s = ExponentialBackoff.from_millis(3).max_delay_millis(10)
    assert take(s, 4) == [ms(3), ms(9), ms(10), ms(10)]


def test_exponential_rejects_negative_base():
    with pytest.raises(ValueError):
        ExponentialBackoff.from_millis(-1)


# ExponentialFactorBackoff


def test_factor_backoff_base_10():
    s = ExponentialFactorBackoff.from_millis(10, 10.0)
    assert take(s, 3) == [ms(10), ms(100), ms(1000)]


def test_factor_backoff_base_4():
    s = ExponentialFactorBackoff.from_millis(10, 4.0)
    assert take(s, 3) == [ms(10), ms(40), ms(160)]


def test_factor_backoff_base_2():
    s = ExponentialFactorBackoff.from_millis(10, 2.0)
    assert take(s, 4) == [ms(10), ms(20), ms(40), ms(80)]


def test_factor_backoff_saturates_at_maximum_value():
    s = ExponentialFactorBackoff.from_millis(U32_MAX - 1, 2.0)
    assert take(s, 3) == [ms(U32_MAX - 1), ms(U32_MAX), ms(U32_MAX)]


def test_factor_backoff_initial_delay_in_seconds():
    s = ExponentialFactorBackoff.from_factor(2.0).initial_delay(1000)
    assert take(s, 4) == [timedelta(seconds=n) for n in (1, 2, 4, 8)]


def test_factor_backoff_default_initial_delay():
    s = ExponentialFactorBackoff.from_factor(3.0)
    assert take(s, 2) == [ms(500), ms(1500)]


def test_factor_backoff_stops_increasing_at_max_delay():
    s = ExponentialFactorBackoff.from_millis(1, 2.0).max_delay(ms(4))
    assert take(s, 4) == [ms(1), ms(2), ms(4), ms(4)]


def test_factor_backoff_returns_max_when_max_less_than_base():
    s = ExponentialFactorBackoff.from_millis(20, 10.0).max_delay(ms(10))
    assert take(s, 2) == [ms(10), ms(10)]


def test_factor_backoff_max_delay_millis():
    s = ExponentialFactorBackoff.from_millis(5, 2.0).max_delay_millis(12)
    assert take(s, 3) == [ms(5), ms(10), ms(12)]


def test_factor_backoff_demo():
    s = ExponentialFactorBackoff.from_millis(500, 2.0)
    assert take(s, 4) == [ms(500), ms(1000), ms(2000), ms(4000)]


# FibonacciBackoff


def test_fibonacci_series_starting_at_10():
    s = FibonacciBackoff.from_millis(10)
    assert take(s, 6) == [ms(v) for v in (10, 10, 20, 30, 50, 80)]


def test_fibonacci_saturates_at_maximum_value():
    s = FibonacciBackoff.from_millis(U64_MAX)
    assert take(s, 2) == [timedelta.max, timedelta.max]


def test_fibonacci_stops_increasing_at_max_delay():
    s = FibonacciBackoff.from_millis(10).max_delay(ms(50))
    assert take(s, 6) == [ms(v) for v in (10, 10, 20, 30, 50, 50)]


def test_fibonacci_returns_max_when_max_less_than_base():
    s = FibonacciBackoff.from_millis(20).max_delay(ms(10))
    assert take(s, 2) == [ms(10), ms(10)]


def test_fibonacci_factor_gives_seconds():
    s = FibonacciBackoff.from_millis(1).factor(1000)
    assert take(s, 3) == [timedelta(seconds=1), timedelta(seconds=1), timedelta(seconds=2)]


def test_fibonacci_max_delay_millis():
    s = FibonacciBackoff.from_millis(10).max_delay_millis(25)
    assert take(s, 5) == [ms(v) for v in (10, 10, 20, 25, 25)]


# FixedInterval


def test_fixed_interval_returns_same_delay():
    s = FixedInterval(ms(123))
    assert take(s, 3) == [ms(123), ms(123), ms(123)]


def test_fixed_interval_from_millis():
    s = FixedInterval.from_millis(100)
    assert next(s) == ms(100)
    assert next(s) == ms(100)


def test_fixed_interval_rejects_negative_millis():
    with pytest.raises(ValueError):
        FixedInterval.from_millis(-5)


def test_builders_chain_on_same_instance():
    s = ExponentialBackoff.from_millis(2)
    assert s.factor(10) is s
    assert next(iter(s)) == ms(20)