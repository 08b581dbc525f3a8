"""Exception types raised by the Safeguard client.

Every error raised by this package derives from :class:`SafeguardError`.
Network-level failures are not wrapped: ``httpx.TransportError`` reaches the
caller unchanged.
"""

from typing import Any


class SafeguardError(Exception):
    """Base class for all Safeguard client errors."""


class ExpiredTokenError(SafeguardError):
    """Raised when the access token read from a token file has expired."""


class ApiError(SafeguardError):
    """Raised when the appliance answers with a non-2xx status code."""

    def __init__(self, method: str, url: str, status_code: int, body: str):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"error during {method} request to {url}: {status_code} - {body}",
        )


class DecodeError(SafeguardError):
    """Raised when a response body cannot be decoded into the expected type."""

    def __init__(self, message: str, body: bytes = b""):
        self.body = body
        super().__init__(message)


class DomainValidationError(SafeguardError):
    """Raised when an operation is rejected before any request is sent."""


class InvalidStateError(DomainValidationError):
    """The access request is in a state that does not allow the operation."""

    def __init__(self, message: str, state: Any):
        self.state = state
        super().__init__(message)


class InvalidTaskIdError(DomainValidationError):
    """The activity log id is empty or not a UUID."""


class UnsupportedTaskTypeError(DomainValidationError):
    """The activity log names a task type that cannot be tracked."""


class PollTimeoutError(SafeguardError):
    """Raised when a poll loop hits its deadline or is cancelled."""

    def __init__(self, message: str, cancelled: bool = False):
        self.cancelled = cancelled
        super().__init__(message)


class BatchCreateError(SafeguardError):
    """Raised when one or more entries of a batch create failed.

    The full result list, successful entries included, is available on
    :attr:`results` so callers can keep what was created.
    """

    def __init__(self, results: list[Any], errors: list[str]):
        self.results = results
        self.errors = errors
        super().__init__("\n".join(errors))
