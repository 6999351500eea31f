"""Run an action repeatedly, sleeping between attempts as a strategy dictates.

An action is a callable taking no arguments. It may be a coroutine function or
a plain function. It signals failure by raising a
:class:`~retryflow.errors.TransientError`, which may be retried, or a
:class:`~retryflow.errors.PermanentError`, which ends the loop at once. Any
other exception propagates unchanged. A strategy is any iterable of
``timedelta`` delays. When it is exhausted, the last error is raised.

The time spent running an action does not shorten the delays between
attempts. Bound long-running actions with a deadline of their own.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import timedelta
from typing import Any, Callable, Iterable

from .errors import TransientError

__all__ = ["retry", "retry_notify", "retry_if"]

_log = logging.getLogger(__name__)


def _always(_err: Any) -> bool:
    return True


def _ignore(_err: Any, _duration: timedelta) -> None:
    return None


async def _attempt(action: Callable[[], Any]) -> Any:
    result = action()
    if inspect.isawaitable(result):
        result = await result
    return result


async def retry_if(
    strategy: Iterable[timedelta],
    action: Callable[[], Any],
    condition: Callable[[Any], bool],
    notify: Callable[[Any, timedelta], None],
) -> Any:
    """Run ``action`` until it succeeds, retrying transient errors that satisfy ``condition``.

    Before each retry ``notify`` is called with the error value and a duration.
    The duration is the error's ``retry_after`` if it has one. Otherwise it is
    the total of the delays taken so far.
    """
    delays = iter(strategy)
    elapsed = timedelta(0)
    while True:
        try:
            return await _attempt(action)
        except TransientError as error:
            if not condition(error.err):
                raise
            duration = error.retry_after if error.retry_after is not None else elapsed
            notify(error.err, duration)
            elapsed = duration
            delay = next(delays, None)
            if delay is None:
                _log.warning("ending retry: strategy reached its limit")
                raise
            elapsed += delay
        await asyncio.sleep(max(delay.total_seconds(), 0.0))


async def retry(strategy: Iterable[timedelta], action: Callable[[], Any]) -> Any:
    """Run ``action`` until it succeeds, retrying every transient error."""
    return await retry_if(strategy, action, _always, _ignore)


async def retry_notify(
    strategy: Iterable[timedelta],
    action: Callable[[], Any],
    notify: Callable[[Any, timedelta], None],
) -> Any:
    """Like :func:`retry`, calling ``notify(err, duration)`` before every retry."""
    return await retry_if(strategy, action, _always, notify)