"""Tests for the access request workflow.

The client is a MagicMock with the SafeguardClient interface; responses are
raw JSON bytes, as the real transport returns them.
"""

import json
import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from safeguard_client import access_requests
from safeguard_client.safeguardapi import client, errors, types
from safeguard_client.safeguardapi.filters import Fields

State = types.AccessRequestState

PENDING = {
    State.PENDING,
    State.PENDING_APPROVAL,
    State.PENDING_TIME_REQUESTED,
    State.PENDING_ACCOUNT_RESTORED,
    State.PENDING_ACCOUNT_ELEVATED,
    State.PENDING_REVIEW,
    State.PENDING_PASSWORD_RESET,
    State.PENDING_ACKNOWLEDGMENT,
}
INVALID = {State.COMPLETE, State.EXPIRED, State.DENIED, State.CANCELED, State.REVOKED}
VALID = {State.PASSWORD_CHECKED_OUT, State.REQUEST_AVAILABLE, State.ACKNOWLEDGED}

FAST = {"interval": 0.01}


def _raw(obj) -> bytes:
    return json.dumps(obj).encode()


def _request_json(state: State, request_id: str = "ar-1") -> dict:
    return {
        "Id": request_id,
        "AccessRequestType": "Password",
        "State": state.value,
        "AccountId": 7,
        "AssetId": 3,
    }


def _request(state: State, request_id: str = "ar-1") -> types.AccessRequest:
    return types.AccessRequest.model_validate(_request_json(state, request_id))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock SafeguardClient with short poll intervals."""
    mock = MagicMock(spec=client.SafeguardClient)
    mock.checkout_poll_interval = 0.01
    mock.task_poll_interval = 0.01
    return mock


@pytest.fixture
def entitlements() -> list[types.AccountEntitlement]:
    """Three password entitlements on different accounts."""
    return [
        types.AccountEntitlement.model_validate(
            {
                "Account": {"Id": account_id, "Name": f"acct{account_id}"},
                "Asset": {"Id": 100 + account_id},
                "Policies": [{"Id": 1, "AccessRequestType": "Password"}],
            },
        )
        for account_id in (1, 2, 3)
    ]


# ---------------------------------------------------------------------------
# State classification
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("state", list(State))
def test_state_classification_matches_fixed_sets(state):
    """Every state is classified exactly as the fixed sets say."""
    assert access_requests.is_pending(state) is (state in PENDING)
    assert access_requests.is_invalid(state) is (state in INVALID)
    assert access_requests.is_valid(state) is (state in VALID)


@pytest.mark.parametrize("state", list(State))
def test_state_is_in_at_most_one_class(state):
    """No state is in more than one class."""
    memberships = [
        access_requests.is_pending(state),
        access_requests.is_invalid(state),
        access_requests.is_valid(state),
    ]
    assert sum(memberships) <= 1


def test_unclassified_states():
    """New, PasswordCheckedIn and a missing state belong to no class."""
    for state in (State.NEW, State.PASSWORD_CHECKED_IN, None):
        assert not access_requests.is_pending(state)
        assert not access_requests.is_invalid(state)
        assert not access_requests.is_valid(state)


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


def test_get_access_request_with_fields(mock_client):
    """Field selection is appended to the request path."""
    mock_client.get.return_value = _raw(_request_json(State.NEW))
    request = access_requests.get_access_request(mock_client, "ar-1", Fields(["Id"]))

    mock_client.get.assert_called_once_with("AccessRequests/ar-1?fields=Id")
    assert request.state is State.NEW


def test_get_access_requests_decodes_list(mock_client):
    """Listing returns one record per element."""
    mock_client.get.return_value = _raw(
        [_request_json(State.NEW, "a"), _request_json(State.DENIED, "b")],
    )
    requests = access_requests.get_access_requests(mock_client)

    mock_client.get.assert_called_once_with("AccessRequests")
    assert [r.id for r in requests] == ["a", "b"]


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("duration", "parts"),
    [
        (timedelta(minutes=45), (0, 0, 45)),
        (timedelta(hours=2, minutes=5), (0, 2, 5)),
        (timedelta(days=1, hours=3, minutes=59, seconds=59), (1, 3, 59)),
        (timedelta(hours=50), (2, 2, 0)),
    ],
)
def test_split_duration(duration, parts):
    """Durations split into days, hours mod 24 and minutes mod 60."""
    assert access_requests.split_duration(duration) == parts


def test_create_sends_one_payload_per_entitlement(mock_client, entitlements):
    """The batch contains one correctly built payload per entitlement."""
    mock_client.post.return_value = _raw(
        [
            {"Response": _request_json(State.NEW, f"ar-{i}"), "IsSuccess": True}
            for i in range(3)
        ],
    )

    results = access_requests.create_access_requests(
        mock_client,
        entitlements,
        timedelta(hours=26, minutes=15),
        reason_comment="patching",
    )

    path, payloads = mock_client.post.call_args.args
    assert path == "AccessRequests/BatchCreate"
    assert [p.account_id for p in payloads] == [1, 2, 3]
    assert [p.asset_id for p in payloads] == [101, 102, 103]
    assert all(p.access_request_type == "Password" for p in payloads)
    assert (
        payloads[0].requested_duration_days,
        payloads[0].requested_duration_hours,
        payloads[0].requested_duration_minutes,
    ) == (1, 2, 15)
    assert payloads[0].reason_comment == "patching"
    assert [r.response.id for r in results] == ["ar-0", "ar-1", "ar-2"]


def test_create_partial_failure_keeps_all_results(mock_client, entitlements):
    """A failed entry raises with the full, ordered result list attached."""
    mock_client.post.return_value = _raw(
        [
            {"Response": _request_json(State.PENDING_APPROVAL, "ar-1"), "IsSuccess": True},
            {
                "IsSuccess": False,
                "StatusCode": "BadRequest",
                "StatusCodeNumber": 400,
                "Error": {"Code": 60108, "Message": "Account is not requestable"},
            },
            {"Response": _request_json(State.REQUEST_AVAILABLE, "ar-3"), "IsSuccess": True},
        ],
    )

    with pytest.raises(errors.BatchCreateError) as exc_info:
        access_requests.create_access_requests(
            mock_client,
            entitlements,
            timedelta(hours=1),
        )

    results = exc_info.value.results
    assert len(results) == 3
    assert "error: Account is not requestable" in str(exc_info.value)
    assert results[0].response.id == "ar-1"
    assert results[0].response.state is State.PENDING_APPROVAL
    assert results[2].response.id == "ar-3"
    assert results[1].status_code_number == 400


def test_create_reports_every_failure(mock_client, entitlements):
    """The combined error lists all failed entries, not just the first."""
    mock_client.post.return_value = _raw(
        [
            {"IsSuccess": False, "Error": {"Message": "first"}},
            {"IsSuccess": True},
            {"IsSuccess": False, "Error": {"Message": "third"}},
        ],
    )

    with pytest.raises(errors.BatchCreateError) as exc_info:
        access_requests.create_access_requests(
            mock_client,
            entitlements,
            timedelta(hours=1),
        )

    assert exc_info.value.errors == ["error: first", "error: third"]
    assert str(exc_info.value) == "error: first\nerror: third"


def test_create_propagates_api_error(mock_client, entitlements):
    """A rejected batch call is not turned into a batch error."""
    mock_client.post.side_effect = errors.ApiError("POST", "url", 403, "denied")

    with pytest.raises(errors.ApiError):
        access_requests.create_access_requests(
            mock_client,
            entitlements,
            timedelta(hours=1),
        )


# ---------------------------------------------------------------------------
# Close
# ---------------------------------------------------------------------------


def test_close_complete_returns_request_unchanged(mock_client):
    """Closing a complete request makes no call and returns the same object."""
    request = _request(State.COMPLETE)

    assert access_requests.close_access_request(mock_client, request) is request
    mock_client.post.assert_not_called()
    mock_client.get.assert_not_called()


def test_close_checked_out_checks_in_once(mock_client):
    """A checked-out request is checked in exactly once."""
    mock_client.post.return_value = _raw(_request_json(State.PASSWORD_CHECKED_IN))

    closed = access_requests.close_access_request(
        mock_client,
        _request(State.PASSWORD_CHECKED_OUT),
    )

    mock_client.post.assert_called_once_with("AccessRequests/ar-1/CheckIn")
    assert closed.state is State.PASSWORD_CHECKED_IN


@pytest.mark.parametrize(
    "state",
    [State.PENDING, State.REQUEST_AVAILABLE, State.PENDING_ACCOUNT_RESTORED],
)
def test_close_cancels_pending_and_available(mock_client, state):
    """Pending and available requests are cancelled."""
    mock_client.post.return_value = _raw(_request_json(State.CANCELED))

    closed = access_requests.close_access_request(mock_client, _request(state))

    mock_client.post.assert_called_once_with("AccessRequests/ar-1/Cancel")
    assert closed.state is State.CANCELED


@pytest.mark.parametrize(
    "state",
    [
        State.DENIED,
        State.EXPIRED,
        State.PENDING_APPROVAL,
        State.PENDING_REVIEW,
        State.NEW,
        State.ACKNOWLEDGED,
    ],
)
def test_close_rejects_other_states_without_calls(mock_client, state):
    """Other states raise an error naming the state and send nothing."""
    with pytest.raises(errors.InvalidStateError, match=state.value) as exc_info:
        access_requests.close_access_request(mock_client, _request(state))

    assert exc_info.value.state is state
    mock_client.post.assert_not_called()


# ---------------------------------------------------------------------------
# Password checkout
# ---------------------------------------------------------------------------


def test_checkout_available_request(mock_client):
    """An available request is checked out straight away."""
    mock_client.post.return_value = b"Pa55w0rd!"

    password = access_requests.check_out_password(
        mock_client,
        _request(State.REQUEST_AVAILABLE),
    )

    assert password == "Pa55w0rd!"
    mock_client.post.assert_called_once_with("AccessRequests/ar-1/CheckOutPassword")
    mock_client.get.assert_not_called()


def test_checkout_returns_json_encoded_body_verbatim(mock_client):
    """Quotes and escapes in the body are part of the returned password."""
    body = json.dumps('ab"c\\d')
    mock_client.post.return_value = body.encode()

    password = access_requests.check_out_password(
        mock_client,
        _request(State.PASSWORD_CHECKED_OUT),
    )
    assert password == body


def test_checkout_keeps_surrounding_quotes(mock_client):
    """A password that is itself quoted comes back with its quotes."""
    mock_client.post.return_value = b'"quoted"'

    password = access_requests.check_out_password(
        mock_client,
        _request(State.PASSWORD_CHECKED_OUT),
    )
    assert password == '"quoted"'


@pytest.mark.parametrize("state", sorted(INVALID, key=lambda s: s.value))
def test_checkout_invalid_state_fails_immediately(mock_client, state):
    """Terminal states fail with the state named and no request sent."""
    with pytest.raises(errors.InvalidStateError, match=state.value):
        access_requests.check_out_password(mock_client, _request(state))

    mock_client.get.assert_not_called()
    mock_client.post.assert_not_called()


def test_checkout_pending_without_wait_fails_immediately(mock_client):
    """A pending request is not polled when waiting is disabled."""
    with pytest.raises(errors.InvalidStateError, match="pending"):
        access_requests.check_out_password(
            mock_client,
            _request(State.PENDING_APPROVAL),
            wait_for_pending=False,
        )

    mock_client.get.assert_not_called()
    mock_client.post.assert_not_called()


def test_checkout_waits_until_available(mock_client):
    """A pending request is re-fetched until available, then checked out."""
    mock_client.get.side_effect = [
        _raw(_request_json(State.PENDING_APPROVAL)),
        _raw(_request_json(State.PENDING_APPROVAL)),
        _raw(_request_json(State.REQUEST_AVAILABLE)),
    ]
    mock_client.post.return_value = b"s3cret"

    password = access_requests.check_out_password(
        mock_client,
        _request(State.PENDING_APPROVAL),
        wait_for_pending=True,
        timeout=5.0,
        **FAST,
    )

    assert password == "s3cret"
    assert mock_client.get.call_count == 3
    mock_client.get.assert_called_with("AccessRequests/ar-1")
    mock_client.post.assert_called_once_with("AccessRequests/ar-1/CheckOutPassword")


def test_checkout_wait_uses_client_poll_interval(mock_client, monkeypatch):
    """Without an explicit interval the client's checkout interval is used."""
    seen = {}

    def fake_poll(check, **kwargs):
        seen.update(kwargs)
        return _request(State.REQUEST_AVAILABLE)

    monkeypatch.setattr(access_requests, "poll", fake_poll)
    mock_client.checkout_poll_interval = 7.5
    mock_client.post.return_value = b"s3cret"

    password = access_requests.check_out_password(
        mock_client,
        _request(State.PENDING),
        wait_for_pending=True,
    )

    assert password == "s3cret"
    assert seen["interval"] == 7.5


def test_checkout_times_out_while_pending(mock_client):
    """A request still pending at the deadline fails with a timeout."""
    mock_client.get.return_value = _raw(_request_json(State.PENDING_REVIEW))

    with pytest.raises(errors.PollTimeoutError) as exc_info:
        access_requests.check_out_password(
            mock_client,
            _request(State.PENDING_REVIEW),
            wait_for_pending=True,
            timeout=0.05,
            **FAST,
        )

    assert not exc_info.value.cancelled
    mock_client.post.assert_not_called()


def test_checkout_wait_can_be_cancelled(mock_client):
    """Setting the cancel event ends the wait without a checkout."""
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(errors.PollTimeoutError) as exc_info:
        access_requests.check_out_password(
            mock_client,
            _request(State.PENDING),
            wait_for_pending=True,
            timeout=5.0,
            cancel=cancel,
            **FAST,
        )

    assert exc_info.value.cancelled
    mock_client.get.assert_not_called()
    mock_client.post.assert_not_called()


def test_checkout_refetch_errors_propagate(mock_client):
    """Errors while re-fetching a pending request are not swallowed."""
    mock_client.get.side_effect = errors.ApiError("GET", "url", 500, "boom")

    with pytest.raises(errors.ApiError):
        access_requests.check_out_password(
            mock_client,
            _request(State.PENDING),
            wait_for_pending=True,
            timeout=5.0,
            **FAST,
        )
    mock_client.post.assert_not_called()
