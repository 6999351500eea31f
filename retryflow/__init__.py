"""Asynchronous retries with backoff strategies, jitter, time limits and retry errors."""

__version__ = "0.5.7"
__all__ = ["backoff", "errors", "limits", "retry"]