# retryflow

Asynchronous retries driven by backoff strategies. Actions can end the retry
loop early with permanent errors, or ask for a specific delay, such as one a
server requests with HTTP 429.

## Installation

```
pip install retryflow
```

The package has no dependencies outside the standard library.

## Modules

- `retryflow.backoff`: the strategies `ExponentialBackoff`,
  `ExponentialFactorBackoff`, `FibonacciBackoff` and `FixedInterval`.
- `retryflow.limits`: `jitter`, `jitter_range`, `max_interval`,
  `max_duration` and `MaxIntervalIterator`.
- `retryflow.errors`: `RetryError`, `PermanentError`, `TransientError`,
  `as_transient` and `as_permanent`.
- `retryflow.retry`: the coroutines `retry`, `retry_notify` and `retry_if`.

## Strategies

A strategy is an endless iterator of `datetime.timedelta` delays. You can cut
it short with `itertools.islice` or with a time limit. Any iterable of
`timedelta` values works as a strategy, so an empty list means "attempt
once".

| Strategy | Delays |
|----------|--------|
| `ExponentialBackoff.from_millis(500)` | 500 ms, 250000 ms, ... (the base raised to the n-th power) |
| `ExponentialFactorBackoff.from_millis(500, 2.0)` | 500 ms, 1000 ms, 2000 ms, 4000 ms, ... |
| `ExponentialFactorBackoff.from_factor(2.0)` | the same, with the initial delay fixed at 500 ms |
| `FixedInterval.from_millis(500)` | 500 ms, 500 ms, 500 ms, ... |
| `FixedInterval(timedelta(milliseconds=500))` | the same |
| `FibonacciBackoff.from_millis(500)` | 500 ms, 500 ms, 1000 ms, 1500 ms, ... |

`ExponentialBackoff` and `FibonacciBackoff` take `.factor(n)`, which
multiplies every delay (`1000` gives delays in seconds).
`ExponentialFactorBackoff` takes `.initial_delay(ms)`. All three take
`.max_delay(timedelta)` or `.max_delay_millis(ms)` to cap a single delay. Once
a delay reaches the cap, every later delay is the cap. The builder methods
change the strategy in place and return it, so you can chain them.

Integer delays saturate instead of overflowing. `ExponentialFactorBackoff`
caps each delay at `2**32 - 1` milliseconds, which is about 49 days.
Millisecond arguments must be non-negative integers. Otherwise a `TypeError`
or `ValueError` is raised.

## Example

```python
import asyncio
from itertools import islice

from retryflow.backoff import ExponentialBackoff
from retryflow.errors import PermanentError, RetryError
from retryflow.limits import max_interval
from retryflow.retry import retry


async def action():
    # do some real work here...
    raise RetryError.permanent("gave up")


async def main():
    strategy = islice(
        max_interval(
            ExponentialBackoff.from_millis(10).factor(1).max_delay_millis(100),
            1000,
        ),
        3,
    )
    try:
        return await retry(strategy, action)
    except PermanentError as error:
        print("failed:", error.err)


asyncio.run(main())
```

An action is any callable that takes no arguments. It may be a coroutine
function or a plain function. `retry` returns the action's result as soon as
an attempt succeeds.

## Error handling

An action steers the retry loop through the exception it raises:

- `RetryError.permanent(err)` returns a `PermanentError`. Raising it ends the
  loop at once, and the `PermanentError` propagates to the caller.
- `RetryError.transient(err)` returns a `TransientError`. Raising it makes the
  loop retry according to the strategy.
- `RetryError.retry_after(err, timedelta(milliseconds=10))` returns a
  `TransientError` whose `retry_after` is set. The notification reports that
  duration.
- Any other exception propagates unchanged, and no retry happens.

When the strategy runs out, the last `TransientError` is raised, and a warning
is logged on the `retryflow.retry` logger. The underlying value is always
available as `error.err`. `str(error)` gives `str(error.err)`, and
`error.description()` returns `"permanent error"` or `"transient error"`.

`as_transient(*exception_types)` and `as_permanent(*exception_types)` turn
ordinary exceptions into retry errors. They work as context managers and as
decorators of plain and async functions. Without arguments they catch
`Exception`. Retry errors that are already raised pass through unchanged.

```python
from retryflow.errors import as_transient

@as_transient(ConnectionError, TimeoutError)
async def fetch():
    ...
```

## Conditions and notifications

```python
from retryflow.retry import retry_if, retry_notify

async def run(strategy, action):
    await retry_notify(strategy, action, lambda err, delay: print(err, delay))
    await retry_if(strategy, action, lambda err: err == 503, lambda err, delay: None)
```

Both callbacks receive the error value, `error.err`, not the exception.
`notify(err, duration)` is called before each retry. `duration` is the error's
`retry_after` if it has one. Otherwise it is the total of the delays taken so
far. `retry_if` stops as soon as the condition returns false for an error,
and raises that error.

## Jitter and time limits

```python
from datetime import timedelta

from retryflow.backoff import FixedInterval
from retryflow.limits import jitter, jitter_range, max_duration, max_interval

delays = map(jitter, FixedInterval.from_millis(100))                  # 50%..150%
delays = map(jitter_range(0.5, 1.2), FixedInterval.from_millis(100))  # 50%..120%
delays = max_interval(FixedInterval.from_millis(100), 10_000)         # 10 s, in ms
delays = max_duration(FixedInterval.from_millis(100), timedelta(seconds=10))
```

`max_interval` and `max_duration` return a `MaxIntervalIterator`. It stops
yielding once the given time has passed since it was created.

The time spent running the action does not change the delays between
attempts. For long-running actions, set a time limit of their own as well.

## Running the tests

```
pip install -e .[test]
pytest
```