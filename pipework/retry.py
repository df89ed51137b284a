"""Bounded retry with a fixed delay, for commands that fail transiently."""
import sys
import time
from typing import Callable

from pipework.errors import AbnormalExit


def _default_retry_if(exc: Exception) -> bool:
    return isinstance(exc, AbnormalExit)


def retry_call(
    fn: Callable,
    attempts: int = 3,
    delay: float = 1.0,
    retry_if: Callable[[Exception], bool] | None = None,
    verbose: bool = False,
):
    """
    Call fn() up to attempts times, sleeping delay seconds between tries.
    Only errors accepted by retry_if are retried (default: nonzero exits);
    anything else, or the last failure, propagates.
    """
    should_retry = retry_if or _default_retry_if
    attempt = 0
    while True:
        attempt += 1
        try:
            return fn()
        except Exception as exc:
            if attempt >= attempts or not should_retry(exc):
                raise
            if verbose:
                print(f"attempt {attempt}/{attempts} failed: {exc}; retrying in {delay}s", file=sys.stderr)
        if delay > 0:
            time.sleep(delay)
