"""Endpoints describing the authenticated user.

Entitlements found here are the input to
:func:`safeguard_client.access_requests.create_access_requests`.
"""

from urllib.parse import quote

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode, decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import (
    AccessRequest,
    AccessRequestRole,
    AccessRequestState,
    AccountEntitlement,
    User,
)

# States in which an actionable request still waits for someone
ACTIONABLE_PENDING_STATES = frozenset(
    {
        AccessRequestState.NEW,
        AccessRequestState.PENDING_APPROVAL,
        AccessRequestState.PENDING_REVIEW,
    },
)


def _bool(value: bool) -> str:
    return "true" if value else "false"


def get_me(client: SafeguardClient, fields: Fields | None = None) -> User:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Me{query}")
    return decode_model(raw, User)


def get_account_entitlements(
    client: SafeguardClient,
    access_request_type: str = "",
    include_active_requests: bool = False,
    filter_by_credential: bool = False,
    filter_: Filter | None = None,
) -> list[AccountEntitlement]:
    """List the accounts the current user may request access to.

    Args:
        client: Authenticated API client.
        access_request_type: Only entitlements of this type when given.
        include_active_requests: Embed the user's open requests.
        filter_by_credential: Only accounts that hold the credential type.
        filter_: Additional filter criteria.
    """
    query = (filter_ or Filter()).to_query_string()
    query += f"&includeActiveRequests={_bool(include_active_requests)}"
    query += f"&filterByCredential={_bool(filter_by_credential)}"
    if access_request_type:
        query += "&accessRequestType=" + quote(access_request_type, safe="")

    raw = client.get(f"Me/AccountEntitlements{query}")
    return decode_list(raw, AccountEntitlement)


def get_actionable_requests(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> dict[AccessRequestRole, list[AccessRequest]]:
    """Return the requests awaiting the current user, grouped by role."""
    raw = client.get("Me/ActionableRequests" + query_string(filter_))
    return decode(raw, dict[AccessRequestRole, list[AccessRequest]])


def get_actionable_requests_by_role(
    client: SafeguardClient,
    role: AccessRequestRole,
    filter_: Filter | None = None,
) -> list[AccessRequest]:
    raw = client.get(f"Me/ActionableRequests/{role.value}" + query_string(filter_))
    return decode_list(raw, AccessRequest)


def get_pending_requests(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AccessRequest]:
    """Return actionable requests that are New, PendingApproval or PendingReview."""
    by_role = get_actionable_requests(client, filter_)
    return [
        request
        for requests in by_role.values()
        for request in requests
        if request.state in ACTIONABLE_PENDING_STATES
    ]
