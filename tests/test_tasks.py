"""Tests for asynchronous account task tracking."""

import json
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from safeguard_client import metrics, tasks
from safeguard_client.safeguardapi import client, errors, types

TASK_ID = "5f0c1b4e-3a52-4d8e-9a31-2c7d1e6f8a90"
OTHER_TASK_ID = "0b9e2f6a-7c41-4e3d-8b25-91a4c3d7e512"
LOG_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

FAST = {"interval": 0.01}


def _iso(value: datetime) -> str:
    return value.isoformat()


def _log(name: str = "ChangePassword", task_id: str = TASK_ID, **extra) -> types.ActivityLog:
    data = {
        "Id": task_id,
        "Name": name,
        "LogTime": _iso(LOG_TIME),
        "AccountId": 7,
        "AccountName": "svc",
    }
    data.update(extra)
    return types.ActivityLog.model_validate(data)


def _row(task_properties: dict, account_id: int = 7) -> dict:
    return {"Id": account_id, "Name": "svc", "TaskProperties": task_properties}


def _report(*rows: dict) -> bytes:
    return json.dumps(list(rows)).encode()


def _change_password_row(
    success: datetime | None = None,
    failure: datetime | None = None,
    task_id: str = TASK_ID,
) -> dict:
    props = {"LastPasswordChangeTaskId": task_id}
    if success is not None:
        props["LastSuccessPasswordChangeDate"] = _iso(success)
    if failure is not None:
        props["LastFailurePasswordChangeDate"] = _iso(failure)
    return _row(props)


# Task type, then the wire names of its task id, success and failure fields
TIMESTAMP_WIRE_FIELDS = [
    (
        "CheckPassword",
        "LastPasswordCheckTaskId",
        "LastSuccessPasswordCheckDate",
        "LastFailurePasswordCheckDate",
    ),
    (
        "ChangePassword",
        "LastPasswordChangeTaskId",
        "LastSuccessPasswordChangeDate",
        "LastFailurePasswordChangeDate",
    ),
    (
        "CheckSshKey",
        "LastSshKeyCheckTaskId",
        "LastSuccessSshKeyCheckDate",
        "LastFailureSshKeyCheckDate",
    ),
    (
        "ChangeSshKey",
        "LastSshKeyChangeTaskId",
        "LastSuccessSshKeyChangeDate",
        "LastFailureSshKeyChangeDate",
    ),
    (
        "DiscoverSshKeys",
        "LastSshKeyDiscoveryTaskId",
        "LastSuccessSshKeyDiscoveryDate",
        "LastFailureSshKeyDiscoveryDate",
    ),
    (
        "SuspendAccount",
        "LastSuspendAccountTaskId",
        "LastSuccessSuspendAccountDate",
        "LastFailureSuspendAccountDate",
    ),
    (
        "RestoreAccount",
        "LastRestoreAccountTaskId",
        "LastSuccessRestoreAccountDate",
        "LastFailureRestoreAccountDate",
    ),
    (
        "ElevateAccount",
        "LastElevateAccountTaskId",
        "LastSuccessElevateAccountDate",
        "LastFailureElevateAccountDate",
    ),
    (
        "DemoteAccount",
        "LastDemoteAccountTaskId",
        "LastSuccessDemoteAccountDate",
        "LastFailureDemoteAccountDate",
    ),
]


def _sample(loop: str, outcome: str) -> float:
    value = metrics.REGISTRY.get_sample_value(
        "safeguard_poll_outcomes_total",
        {"loop": loop, "outcome": outcome},
    )
    return value or 0.0


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock SafeguardClient with a short task poll interval."""
    mock = MagicMock(spec=client.SafeguardClient)
    mock.task_poll_interval = 0.01
    return mock


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("name", ["Archive", "TestConnection", "NotATask", ""])
def test_unsupported_task_type_rejected_without_calls(mock_client, name):
    """Untrackable task types fail before any request is sent."""
    with pytest.raises(errors.UnsupportedTaskTypeError, match="unsupported task type"):
        tasks.check_task_state(mock_client, _log(name=name), timeout=1.0, **FAST)

    mock_client.get.assert_not_called()


def test_empty_task_id_rejected(mock_client):
    """A log without an id cannot be tracked."""
    with pytest.raises(errors.InvalidTaskIdError, match="invalid task ID"):
        tasks.check_task_state(mock_client, _log(task_id=""), timeout=1.0, **FAST)

    mock_client.get.assert_not_called()


def test_malformed_task_id_rejected(mock_client):
    """A non-UUID id is reported as a format error."""
    with pytest.raises(errors.InvalidTaskIdError, match="format"):
        tasks.check_task_state(mock_client, _log(task_id="not-a-uuid"), timeout=1.0, **FAST)

    mock_client.get.assert_not_called()


def test_domain_errors_share_base_class():
    """Both validation errors are domain validation errors."""
    assert issubclass(errors.UnsupportedTaskTypeError, errors.DomainValidationError)
    assert issubclass(errors.InvalidTaskIdError, errors.DomainValidationError)


# ---------------------------------------------------------------------------
# Timestamp-based outcomes
# ---------------------------------------------------------------------------


def test_success_after_log_time(mock_client):
    """A success recorded after the job started resolves on the first query."""
    mock_client.get.return_value = _report(
        _change_password_row(success=LOG_TIME + timedelta(seconds=1)),
    )

    assert tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST) is True
    assert mock_client.get.call_count == 1


@pytest.mark.parametrize(
    ("name", "task_id_field", "success_field", "failure_field"),
    TIMESTAMP_WIRE_FIELDS,
)
def test_every_timestamp_type_detects_success(
    mock_client,
    name,
    task_id_field,
    success_field,
    failure_field,
):
    """Each tracked type reads its own task id and success date."""
    mock_client.get.return_value = _report(
        _row(
            {
                task_id_field: TASK_ID,
                success_field: _iso(LOG_TIME + timedelta(seconds=1)),
                failure_field: _iso(LOG_TIME - timedelta(days=1)),
            },
        ),
    )

    assert tasks.check_task_state(mock_client, _log(name=name), timeout=1.0) is True
    assert mock_client.get.call_args.args[0].startswith(
        f"Reports/Tasks/AccountTaskSchedules/{name}?",
    )


@pytest.mark.parametrize(
    ("name", "task_id_field", "success_field", "failure_field"),
    TIMESTAMP_WIRE_FIELDS,
)
def test_every_timestamp_type_detects_failure(
    mock_client,
    name,
    task_id_field,
    success_field,
    failure_field,
):
    """Each tracked type reads its own failure date."""
    mock_client.get.return_value = _report(
        _row(
            {
                task_id_field: TASK_ID,
                success_field: _iso(LOG_TIME - timedelta(days=1)),
                failure_field: _iso(LOG_TIME + timedelta(seconds=1)),
            },
        ),
    )

    assert tasks.check_task_state(mock_client, _log(name=name), timeout=1.0) is False


def test_timestamp_table_covers_every_tracked_type():
    """The wire-name table above lists every timestamp task type."""
    assert {row[0] for row in TIMESTAMP_WIRE_FIELDS} == {
        task_type.value for task_type in tasks.TIMESTAMP_TASKS
    }


def test_report_query_targets_task_and_account(mock_client):
    """The report is queried for the task type, filtered to the account."""
    mock_client.get.return_value = _report(
        _change_password_row(success=LOG_TIME + timedelta(seconds=1)),
    )

    tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST)

    mock_client.get.assert_called_once_with(
        "Reports/Tasks/AccountTaskSchedules/ChangePassword"
        "?filter=%28Id%20eq%20%277%27%29&count=false",
    )


def test_failure_after_log_time(mock_client):
    """A failure recorded after the job started means the task failed."""
    mock_client.get.return_value = _report(
        _change_password_row(failure=LOG_TIME + timedelta(seconds=5)),
    )

    assert tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST) is False


def test_stale_success_keeps_polling(mock_client):
    """A success older than the job is ignored until a fresh one appears."""
    mock_client.get.side_effect = [
        _report(_change_password_row(success=LOG_TIME - timedelta(days=1))),
        _report(_change_password_row(success=LOG_TIME + timedelta(seconds=3))),
    ]

    assert tasks.check_task_state(mock_client, _log(), timeout=5.0, **FAST) is True
    assert mock_client.get.call_count == 2


def test_success_wins_over_failure(mock_client):
    """When both dates qualify, the task counts as a success."""
    mock_client.get.return_value = _report(
        _change_password_row(
            success=LOG_TIME + timedelta(seconds=1),
            failure=LOG_TIME + timedelta(seconds=2),
        ),
    )

    assert tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST) is True


def test_task_not_yet_visible_is_retried(mock_client):
    """Empty reports and rows for other tasks are retried."""
    mock_client.get.side_effect = [
        _report(),
        _report(_change_password_row(success=LOG_TIME, task_id=OTHER_TASK_ID)),
        _report(_change_password_row(success=LOG_TIME + timedelta(seconds=2))),
    ]

    assert tasks.check_task_state(mock_client, _log(), timeout=5.0, **FAST) is True
    assert mock_client.get.call_count == 3


def test_lookup_errors_are_retried(mock_client):
    """API and transport errors during lookup do not end the wait."""
    mock_client.get.side_effect = [
        errors.ApiError("GET", "url", 503, "unavailable"),
        httpx.ConnectError("connection refused"),
        _report(_change_password_row(failure=LOG_TIME + timedelta(seconds=2))),
    ]

    assert tasks.check_task_state(mock_client, _log(), timeout=5.0, **FAST) is False
    assert mock_client.get.call_count == 3


def test_timeout_when_no_outcome(mock_client):
    """A task that never reports an outcome times out."""
    mock_client.get.return_value = _report(_change_password_row())
    before = _sample("task", "timeout")

    with pytest.raises(errors.PollTimeoutError) as exc_info:
        tasks.check_task_state(mock_client, _log(), timeout=0.05, **FAST)

    assert not exc_info.value.cancelled
    assert _sample("task", "timeout") == before + 1


def test_wait_uses_client_poll_interval(mock_client, monkeypatch):
    """Without an explicit interval the client's task interval is used."""
    seen = {}

    def fake_poll(check, **kwargs):
        seen.update(kwargs)
        return True

    monkeypatch.setattr(tasks, "poll", fake_poll)
    mock_client.task_poll_interval = 4.0
    mock_client.get.return_value = _report()

    assert tasks.check_task_state(mock_client, _log(), timeout=1.0) is True
    assert seen["interval"] == 4.0


def test_cancel_ends_wait(mock_client):
    """Setting the cancel event ends the wait after the immediate query."""
    mock_client.get.return_value = _report()
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(errors.PollTimeoutError) as exc_info:
        tasks.check_task_state(mock_client, _log(), timeout=5.0, cancel=cancel, **FAST)

    assert exc_info.value.cancelled
    assert mock_client.get.call_count == 1


def test_naive_timestamps_are_utc(mock_client):
    """Report timestamps without an offset compare as UTC."""
    mock_client.get.return_value = _report(
        _row(
            {
                "LastPasswordChangeTaskId": TASK_ID,
                "LastSuccessPasswordChangeDate": "2024-03-01T12:00:01",
            },
        ),
    )

    assert tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST) is True


def test_outcome_counts_as_metric(mock_client):
    """Finished tasks are counted by outcome."""
    mock_client.get.return_value = _report(
        _change_password_row(failure=LOG_TIME + timedelta(seconds=1)),
    )
    before = _sample("task", "failure")

    tasks.check_task_state(mock_client, _log(), timeout=1.0, **FAST)

    assert _sample("task", "failure") == before + 1


# ---------------------------------------------------------------------------
# Counter-based outcomes
# ---------------------------------------------------------------------------


def test_api_key_check_without_failures_succeeds(mock_client):
    """A zero failure counter means success."""
    mock_client.get.return_value = _report(_row({"FailedApiKeyCheckAttempts": 0}))

    assert tasks.check_task_state(mock_client, _log(name="CheckApiKey"), timeout=1.0, **FAST)
    assert mock_client.get.call_count == 1


def test_api_key_change_with_failures_fails(mock_client):
    """A positive failure counter means failure."""
    mock_client.get.return_value = _report(_row({"FailedApiKeyChangeAttempts": 2}))

    outcome = tasks.check_task_state(
        mock_client,
        _log(name="ChangeApiKey"),
        timeout=1.0,
        **FAST,
    )
    assert outcome is False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_task_outcome_without_log_time_accepts_any_set_date():
    """Without a start time, any real date counts."""
    props = types.TaskProperties(
        last_success_ssh_key_check_date=datetime(2020, 1, 1, tzinfo=timezone.utc),
    )
    assert tasks.task_outcome(types.TaskName.CHECK_SSH_KEY, props, None) is True


def test_task_outcome_ignores_placeholder_dates():
    """Year-one placeholder dates are not outcomes."""
    props = types.TaskProperties(
        last_success_password_check_date=datetime(1, 1, 1, tzinfo=timezone.utc),
    )
    assert tasks.task_outcome(types.TaskName.CHECK_PASSWORD, props, LOG_TIME) is None


def test_find_matching_task_skips_unparsable_ids():
    """Rows whose recorded id is not a UUID are skipped."""
    rows = [
        types.AccountTaskData.model_validate(
            _row({"LastSuspendAccountTaskId": "garbage"}),
        ),
        types.AccountTaskData.model_validate(
            _row({"LastSuspendAccountTaskId": TASK_ID.upper()}),
        ),
    ]

    match = tasks.find_matching_task(
        rows,
        types.TaskName.SUSPEND_ACCOUNT,
        tasks.parse_task_id(TASK_ID),
    )
    assert match is rows[1]
