"""Error values that tell the retry loop whether an attempt may be repeated."""

from __future__ import annotations

import functools
import inspect
from datetime import timedelta
from typing import Any, Callable, Optional, Tuple, Type

_PERMANENT_ERROR = "permanent error"
_TRANSIENT_ERROR = "transient error"


class RetryError(Exception):
    """Base of the errors an action raises to steer the retry loop.

    ``err`` holds the underlying error value.
    """

    _description = ""
    _kind = ""

    def __init__(self, err: Any) -> None:
        super().__init__(err)
        self.err = err

    @classmethod
    def permanent(cls, err: Any) -> "PermanentError":
        """Create an error that stops retrying at once."""
        return PermanentError(err)

    @classmethod
    def transient(cls, err: Any) -> "TransientError":
        """Create an error retried according to the strategy."""
        return TransientError(err)

    @classmethod
    def retry_after(cls, err: Any, duration: timedelta) -> "TransientError":
        """Create an error retried after ``duration``, e.g. for rate limits."""
        return TransientError(err, retry_after=duration)

    def description(self) -> str:
        """Short name of the kind of error."""
        return self._description

    def __str__(self) -> str:
        return str(self.err)

    def __repr__(self) -> str:
        return f"{self._kind}({self.err!r})"

    __hash__ = Exception.__hash__


class PermanentError(RetryError):
    """The operation cannot succeed; the retry loop returns early."""

    _description = _PERMANENT_ERROR
    _kind = "Permanent"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermanentError):
            return NotImplemented
        return self.err == other.err

    __hash__ = RetryError.__hash__


class TransientError(RetryError):
    """A temporary failure.

    With ``retry_after`` unset the strategy decides the next delay;
    otherwise the given duration is used.
    """

    _description = _TRANSIENT_ERROR
    _kind = "Transient"

    def __init__(self, err: Any, retry_after: Optional[timedelta] = None) -> None:
        super().__init__(err)
        self.retry_after = retry_after

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransientError):
            return NotImplemented
        return self.err == other.err and self.retry_after == other.retry_after

    __hash__ = RetryError.__hash__


class _ErrorMapper:
    """Context manager and decorator turning exceptions into retry errors."""

    def __init__(
        self,
        types: Tuple[Type[BaseException], ...],
        wrap: Callable[[BaseException], RetryError],
    ) -> None:
        self._types = types
        self._wrap = wrap

    def __enter__(self) -> "_ErrorMapper":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None or isinstance(exc, RetryError):
            return False
        if isinstance(exc, self._types):
            raise self._wrap(exc) from exc
        return False

    def __call__(self, func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with self:
                    return await func(*args, **kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return wrapper


def _exception_types(args: Tuple[Any, ...]) -> Tuple[Type[BaseException], ...]:
    if not args:
        return (Exception,)
    for arg in args:
        if not (isinstance(arg, type) and issubclass(arg, BaseException)):
            raise TypeError(f"expected exception types, got {arg!r}")
    return tuple(args)


def as_transient(*args: Type[BaseException]) -> _ErrorMapper:
    """Re-raise the given exception types (default ``Exception``) as transient errors.

    Usable as a context manager or as a decorator of sync and async functions.
    Errors that already are retry errors pass through unchanged.
    """
    return _ErrorMapper(_exception_types(args), TransientError)


def as_permanent(*args: Type[BaseException]) -> _ErrorMapper:
    """Re-raise the given exception types (default ``Exception``) as permanent errors.

    Usable as a context manager or as a decorator of sync and async functions.
    Errors that already are retry errors pass through unchanged.
    """
    return _ErrorMapper(_exception_types(args), PermanentError)