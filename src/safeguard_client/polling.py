"""Fixed-interval polling bounded by a deadline and an optional cancel event."""

import threading
import time
from collections.abc import Callable
from typing import TypeVar

import structlog

from .safeguardapi.errors import PollTimeoutError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def poll(
    check: Callable[[], T | None],
    *,
    interval: float,
    timeout: float,
    cancel: threading.Event | None = None,
    description: str = "condition",
) -> T:
    """Call ``check`` every ``interval`` seconds until it returns a value.

    The first call happens one interval after entry. A wait that would run
    past the deadline is cut short and followed by one last call at the
    deadline, so ``check`` runs at least once even when ``timeout`` is
    shorter than ``interval``. Waiting is done on ``cancel`` (or a private
    event), so setting the event stops the loop at once rather than at the
    next tick.

    Args:
        check: Returns None while the awaited condition does not hold.
        interval: Seconds between calls.
        timeout: Seconds after which to give up.
        cancel: Optional event the caller sets to abandon the wait.
        description: Used in log events and the timeout message.

    Returns:
        The first non-None result of ``check``.

    Raises:
        PollTimeoutError: If the deadline passes without a result, or
            ``cancel`` is set first.
        ValueError: If interval or timeout is not positive.
    """
    if interval <= 0:
        msg = "interval must be positive"
        raise ValueError(msg)
    if timeout <= 0:
        msg = "timeout must be positive"
        raise ValueError(msg)

    event = cancel if cancel is not None else threading.Event()
    deadline = time.monotonic() + timeout
    attempts = 0

    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.info("Poll timed out", waiting_for=description, attempts=attempts)
            msg = f"timed out waiting for {description}"
            raise PollTimeoutError(msg)

        if event.wait(min(interval, remaining)):
            break

        attempts += 1
        result = check()
        if result is not None:
            logger.debug("Poll finished", waiting_for=description, attempts=attempts)
            return result

    logger.info("Poll cancelled", waiting_for=description, attempts=attempts)
    msg = f"cancelled while waiting for {description}"
    raise PollTimeoutError(msg, cancelled=True)
