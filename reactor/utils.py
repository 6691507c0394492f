"""
Reactor Utilities - Shared helper functions.
"""
import threading
import logging
from concurrent.futures import Future
from typing import Any, Callable

logger = logging.getLogger(__name__)


def run_async(fn: Callable[..., Any], *args) -> Future:
    """Run fn in a daemon thread and return a Future for its outcome.

    Exceptions are logged and stored on the future, never raised in the thread.
    """
    future: Future = Future()

    def wrapper():
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except Exception as e:
            logger.warning(f'Async task {fn.__name__} failed: {e}', exc_info=True)
            future.set_exception(e)
        else:
            future.set_result(result)

    threading.Thread(target=wrapper, daemon=True).start()
    return future


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))
