"""Access request workflow.

An access request moves through a server-side state machine. This module
classifies states, creates requests from entitlements in one batch, and
drives the client-side actions: cancel, check-in, close and password
checkout. Every function takes the :class:`SafeguardClient` explicitly and
returns fresh snapshots; records never hold a connection.
"""

import threading
from datetime import timedelta

import structlog

from . import metrics
from .polling import poll
from .safeguardapi.client import SafeguardClient
from .safeguardapi.decoding import decode_list, decode_model
from .safeguardapi.errors import BatchCreateError, InvalidStateError, PollTimeoutError
from .safeguardapi.filters import Filter, Fields, query_string
from .safeguardapi.types import (
    AccessRequest,
    AccessRequestBatchResponse,
    AccessRequestState,
    AccountEntitlement,
    NewAccessRequest,
)

logger = structlog.get_logger(__name__)

DEFAULT_CHECKOUT_TIMEOUT = 300.0

State = AccessRequestState

PENDING_STATES = frozenset(
    {
        State.PENDING,
        State.PENDING_APPROVAL,
        State.PENDING_TIME_REQUESTED,
        State.PENDING_ACCOUNT_RESTORED,
        State.PENDING_ACCOUNT_ELEVATED,
        State.PENDING_REVIEW,
        State.PENDING_PASSWORD_RESET,
        State.PENDING_ACKNOWLEDGMENT,
    },
)

INVALID_STATES = frozenset(
    {State.COMPLETE, State.EXPIRED, State.DENIED, State.CANCELED, State.REVOKED},
)

VALID_STATES = frozenset(
    {State.PASSWORD_CHECKED_OUT, State.REQUEST_AVAILABLE, State.ACKNOWLEDGED},
)

# States close_access_request answers with a cancel
_CANCEL_ON_CLOSE = frozenset(
    {State.PENDING, State.REQUEST_AVAILABLE, State.PENDING_ACCOUNT_RESTORED},
)


def is_pending(state: AccessRequestState | None) -> bool:
    return state in PENDING_STATES


def is_valid(state: AccessRequestState | None) -> bool:
    """Return True if a password can be checked out in ``state``."""
    return state in VALID_STATES


def is_invalid(state: AccessRequestState | None) -> bool:
    """Return True if ``state`` is terminal and rules out a checkout."""
    return state in INVALID_STATES


# Retrieval


def get_access_requests(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AccessRequest]:
    raw = client.get("AccessRequests" + query_string(filter_))
    return decode_list(raw, AccessRequest)


def get_access_request(
    client: SafeguardClient,
    request_id: str,
    fields: Fields | None = None,
) -> AccessRequest:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AccessRequests/{request_id}{query}")
    return decode_model(raw, AccessRequest)


def refresh_access_request(
    client: SafeguardClient,
    request: AccessRequest,
) -> AccessRequest:
    """Return a fresh snapshot of ``request``."""
    return get_access_request(client, request.id)


# Creation


def split_duration(duration: timedelta) -> tuple[int, int, int]:
    """Split a duration into the (days, hours, minutes) the API accepts.

    Seconds are dropped; hours and minutes wrap at 24 and 60.
    """
    total_minutes = int(duration.total_seconds()) // 60
    total_hours = total_minutes // 60
    return total_hours // 24, total_hours % 24, total_minutes % 60


def build_access_request(
    entitlement: AccountEntitlement,
    duration: timedelta,
    requester_username: str = "",
    reason_code: str = "",
    reason_comment: str = "",
    is_emergency: bool = False,
) -> NewAccessRequest:
    """Build the batch-create payload for one entitlement."""
    days, hours, minutes = split_duration(duration)
    return NewAccessRequest(
        access_request_type=entitlement.access_request_type,
        account_id=entitlement.account.id,
        asset_id=entitlement.asset.id,
        requested_duration_days=days,
        requested_duration_hours=hours,
        requested_duration_minutes=minutes,
        requester_username=requester_username,
        reason_code=reason_code,
        reason_comment=reason_comment,
        is_emergency=is_emergency,
    )


def create_access_requests(
    client: SafeguardClient,
    entitlements: list[AccountEntitlement],
    duration: timedelta,
    requester_username: str = "",
    reason_code: str = "",
    reason_comment: str = "",
    is_emergency: bool = False,
) -> list[AccessRequestBatchResponse]:
    """Request access for every entitlement in a single batch call.

    Args:
        client: Authenticated API client.
        entitlements: Entitlements to request; each yields one payload.
        duration: Requested access duration.
        requester_username: Optional user to request on behalf of.
        reason_code: Optional reason code name.
        reason_comment: Optional free-text reason.
        is_emergency: Whether to flag the requests as emergency access.

    Returns:
        One response per entitlement, in the same order.

    Raises:
        BatchCreateError: If any entry failed. Its ``results`` attribute
            holds the complete response list, successes included.
        ApiError: If the batch call itself is rejected.
        DecodeError: If the response cannot be decoded.
    """
    payloads = [
        build_access_request(
            entitlement,
            duration,
            requester_username=requester_username,
            reason_code=reason_code,
            reason_comment=reason_comment,
            is_emergency=is_emergency,
        )
        for entitlement in entitlements
    ]
    logger.info("Creating access requests", count=len(payloads))

    raw = client.post("AccessRequests/BatchCreate", payloads)
    results = decode_list(raw, AccessRequestBatchResponse)

    errors = [
        f"error: {result.error.message if result.error else ''}"
        for result in results
        if not result.is_success
    ]
    if errors:
        logger.warning(
            "Batch create partially failed",
            submitted=len(payloads),
            failed=len(errors),
        )
        raise BatchCreateError(results, errors)

    return results


# Actions


def cancel_access_request(
    client: SafeguardClient,
    request: AccessRequest,
) -> AccessRequest:
    logger.info("Cancelling access request", request_id=request.id)
    raw = client.post(f"AccessRequests/{request.id}/Cancel")
    return decode_model(raw, AccessRequest)


def check_in_access_request(
    client: SafeguardClient,
    request: AccessRequest,
) -> AccessRequest:
    logger.info("Checking in access request", request_id=request.id)
    raw = client.post(f"AccessRequests/{request.id}/CheckIn")
    return decode_model(raw, AccessRequest)


def close_access_request(
    client: SafeguardClient,
    request: AccessRequest,
) -> AccessRequest:
    """Close a request in whatever way its current state allows.

    A checked-out password is checked in; a pending or available request is
    cancelled; a complete request is returned unchanged.

    Raises:
        InvalidStateError: For any other state. No request is sent.
    """
    state = request.state
    if state == State.PASSWORD_CHECKED_OUT:
        return check_in_access_request(client, request)
    if state in _CANCEL_ON_CLOSE:
        return cancel_access_request(client, request)
    if state == State.COMPLETE:
        return request

    msg = f"cannot close access request in state: {state}"
    raise InvalidStateError(msg, state=state)


def check_out_password(
    client: SafeguardClient,
    request: AccessRequest,
    wait_for_pending: bool = False,
    timeout: float = DEFAULT_CHECKOUT_TIMEOUT,
    cancel: threading.Event | None = None,
    interval: float | None = None,
) -> str:
    """Check out the password granted by an access request.

    Args:
        client: Authenticated API client.
        request: The access request to check out.
        wait_for_pending: If the request is still pending, poll until it
            becomes available instead of failing.
        timeout: Seconds to wait for a pending request.
        cancel: Optional event that abandons the wait when set.
        interval: Seconds between re-fetches while waiting. Defaults to
            the client's ``checkout_poll_interval``.

    Returns:
        The response body as text, exactly as the appliance sent it.

    Raises:
        InvalidStateError: If the request is terminal, or pending while
            ``wait_for_pending`` is False.
        PollTimeoutError: If the request is still pending at the deadline
            or the wait is cancelled.
        ApiError: If a re-fetch or the checkout call is rejected.
    """
    state = request.state
    if is_invalid(state):
        msg = f"cannot check out password for access request in state: {state}"
        raise InvalidStateError(msg, state=state)

    if is_pending(state):
        if not wait_for_pending:
            msg = f"access request is pending (state: {state}), not waiting"
            raise InvalidStateError(msg, state=state)

        logger.info(
            "Waiting for pending access request",
            request_id=request.id,
            state=str(state),
            timeout_seconds=timeout,
        )

        def _available() -> AccessRequest | None:
            current = refresh_access_request(client, request)
            logger.debug(
                "Polled access request",
                request_id=request.id,
                state=str(current.state),
            )
            return current if is_valid(current.state) else None

        try:
            request = poll(
                _available,
                interval=(
                    client.checkout_poll_interval if interval is None else interval
                ),
                timeout=timeout,
                cancel=cancel,
                description=f"access request {request.id} to become available",
            )
        except PollTimeoutError:
            metrics.record_poll_outcome("checkout", "timeout")
            raise
        metrics.record_poll_outcome("checkout", "success")

    raw = client.post(f"AccessRequests/{request.id}/CheckOutPassword")
    logger.info("Password checked out", request_id=request.id)
    return raw.decode()
