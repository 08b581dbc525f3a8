"""Safeguard REST API client package.

Provides the authenticated HTTP transport for the Safeguard core API
together with the typed records, query builder and error types shared by
the resource and workflow modules.

Exports:
    SafeguardClient: HTTP client with authentication and error handling.
    Filter, Fields, FilterOperator: Query-string builders.
    types: Module containing Pydantic models for API resources.
    errors: Module containing the exception hierarchy.
    DEFAULT_API_VERSION: Default core API version.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
    DEFAULT_CHECKOUT_POLL_INTERVAL, DEFAULT_TASK_POLL_INTERVAL: Default
        waits between checks in the workflow helpers.
"""

from . import errors, types
from .client import (
    DEFAULT_API_VERSION,
    DEFAULT_CHECKOUT_POLL_INTERVAL,
    DEFAULT_TASK_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    SafeguardClient,
    safe_headers,
)
from .errors import (
    ApiError,
    BatchCreateError,
    DecodeError,
    ExpiredTokenError,
    InvalidStateError,
    InvalidTaskIdError,
    PollTimeoutError,
    SafeguardError,
    UnsupportedTaskTypeError,
)
from .filters import Fields, Filter, FilterOperator

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_CHECKOUT_POLL_INTERVAL",
    "DEFAULT_TASK_POLL_INTERVAL",
    "DEFAULT_TIMEOUT",
    "ApiError",
    "BatchCreateError",
    "DecodeError",
    "ExpiredTokenError",
    "Fields",
    "Filter",
    "FilterOperator",
    "InvalidStateError",
    "InvalidTaskIdError",
    "PollTimeoutError",
    "SafeguardClient",
    "SafeguardError",
    "UnsupportedTaskTypeError",
    "errors",
    "safe_headers",
    "types",
]
