"""Tracking of asynchronous account tasks.

Account actions such as a password change return an :class:`ActivityLog`
as soon as the appliance accepts the job. The outcome only shows up later
in the account's task properties, reported per task type by the
account-task-schedules report. :func:`check_task_state` finds the report
row belonging to the job and polls it until the job succeeded or failed.
"""

import threading
import uuid
from datetime import datetime, timezone

import httpx
import structlog

from . import metrics
from .polling import poll
from .resources import reports
from .safeguardapi.client import SafeguardClient
from .safeguardapi.errors import (
    InvalidTaskIdError,
    PollTimeoutError,
    SafeguardError,
    UnsupportedTaskTypeError,
)
from .safeguardapi.filters import Filter, FilterOperator
from .safeguardapi.types import (
    AccountTaskData,
    ActivityLog,
    TaskName,
    TaskProperties,
    is_set,
)

logger = structlog.get_logger(__name__)

DEFAULT_TASK_TIMEOUT = 300.0

# Task type -> (task id field, success date field, failure date field)
TIMESTAMP_TASKS: dict[TaskName, tuple[str, str, str]] = {
    TaskName.CHECK_PASSWORD: (
        "last_password_check_task_id",
        "last_success_password_check_date",
        "last_failure_password_check_date",
    ),
    TaskName.CHANGE_PASSWORD: (
        "last_password_change_task_id",
        "last_success_password_change_date",
        "last_failure_password_change_date",
    ),
    TaskName.CHECK_SSH_KEY: (
        "last_ssh_key_check_task_id",
        "last_success_ssh_key_check_date",
        "last_failure_ssh_key_check_date",
    ),
    TaskName.CHANGE_SSH_KEY: (
        "last_ssh_key_change_task_id",
        "last_success_ssh_key_change_date",
        "last_failure_ssh_key_change_date",
    ),
    TaskName.DISCOVER_SSH_KEYS: (
        "last_ssh_key_discovery_task_id",
        "last_success_ssh_key_discovery_date",
        "last_failure_ssh_key_discovery_date",
    ),
    TaskName.SUSPEND_ACCOUNT: (
        "last_suspend_account_task_id",
        "last_success_suspend_account_date",
        "last_failure_suspend_account_date",
    ),
    TaskName.RESTORE_ACCOUNT: (
        "last_restore_account_task_id",
        "last_success_restore_account_date",
        "last_failure_restore_account_date",
    ),
    TaskName.ELEVATE_ACCOUNT: (
        "last_elevate_account_task_id",
        "last_success_elevate_account_date",
        "last_failure_elevate_account_date",
    ),
    TaskName.DEMOTE_ACCOUNT: (
        "last_demote_account_task_id",
        "last_success_demote_account_date",
        "last_failure_demote_account_date",
    ),
}

# Task types that only report a failure counter
COUNTER_TASKS: dict[TaskName, str] = {
    TaskName.CHECK_API_KEY: "failed_api_key_check_attempts",
    TaskName.CHANGE_API_KEY: "failed_api_key_change_attempts",
}


def _utc(value: datetime) -> datetime:
    # The appliance omits the offset on some timestamps; they are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_task_type(log: ActivityLog) -> TaskName:
    """Return the trackable task type named by ``log``.

    Raises:
        UnsupportedTaskTypeError: If the outcome of this task type cannot
            be read from the account's task properties.
    """
    try:
        task_type = TaskName(log.name)
    except ValueError:
        task_type = None
    if task_type not in TIMESTAMP_TASKS and task_type not in COUNTER_TASKS:
        msg = f"unsupported task type: {log.name!r}"
        raise UnsupportedTaskTypeError(msg)
    return task_type


def parse_task_id(task_id: str) -> uuid.UUID:
    """Parse an activity log id.

    Raises:
        InvalidTaskIdError: If the id is empty or not a UUID.
    """
    if not task_id:
        msg = "invalid task ID"
        raise InvalidTaskIdError(msg)
    try:
        return uuid.UUID(task_id)
    except ValueError:
        msg = f"invalid task ID format: {task_id!r}"
        raise InvalidTaskIdError(msg) from None


def find_matching_task(
    records: list[AccountTaskData],
    task_type: TaskName,
    task_id: uuid.UUID,
) -> AccountTaskData | None:
    """Pick the report row that belongs to the task ``task_id``.

    Counter-based task types record no task id, so the first row (the
    account itself) is used.
    """
    if task_type in COUNTER_TASKS:
        return records[0] if records else None

    id_field = TIMESTAMP_TASKS[task_type][0]
    for record in records:
        recorded = getattr(record.task_properties, id_field)
        try:
            if recorded and uuid.UUID(recorded) == task_id:
                return record
        except ValueError:
            continue
    return None


def task_outcome(
    task_type: TaskName,
    properties: TaskProperties,
    log_time: datetime | None,
) -> bool | None:
    """Evaluate a task's outcome from the account's task properties.

    Returns True for success, False for failure and None while neither is
    observable. Success is checked before failure.
    """
    if task_type in COUNTER_TASKS:
        return getattr(properties, COUNTER_TASKS[task_type]) == 0

    _, success_field, failure_field = TIMESTAMP_TASKS[task_type]
    threshold = _utc(log_time) if is_set(log_time) else None

    for field_name, outcome in ((success_field, True), (failure_field, False)):
        value = getattr(properties, field_name)
        if is_set(value) and (threshold is None or _utc(value) >= threshold):
            return outcome
    return None


def check_task_state(
    client: SafeguardClient,
    log: ActivityLog,
    timeout: float = DEFAULT_TASK_TIMEOUT,
    cancel: threading.Event | None = None,
    interval: float | None = None,
) -> bool:
    """Wait for the task behind ``log`` to succeed or fail.

    The report is queried once right away and then every ``interval``
    seconds. Lookup errors and a not-yet-visible task are retried until
    the deadline.

    Args:
        client: Authenticated API client.
        log: Activity log returned when the task was started.
        timeout: Seconds to wait for an outcome.
        cancel: Optional event that abandons the wait when set.
        interval: Seconds between report queries. Defaults to the
            client's ``task_poll_interval``.

    Returns:
        True if the task succeeded, False if it failed.

    Raises:
        UnsupportedTaskTypeError: If the task type cannot be tracked.
        InvalidTaskIdError: If the log id is empty or not a UUID.
        PollTimeoutError: If no outcome is seen before the deadline, or the
            wait is cancelled.
    """
    task_type = resolve_task_type(log)
    task_id = parse_task_id(log.id)

    filter_ = Filter()
    filter_.add_filter("Id", FilterOperator.EQUAL, str(log.account_id))

    log_ctx = logger.bind(
        task_id=log.id,
        task_type=task_type.value,
        account_id=log.account_id,
    )
    log_ctx.info("Checking task state", timeout_seconds=timeout)

    def _attempt() -> bool | None:
        try:
            records = reports.get_account_task_schedules(
                client,
                task_type.value,
                filter_,
            )
        except (SafeguardError, httpx.HTTPError) as e:
            log_ctx.warning("Task lookup failed, retrying", error=str(e))
            return None

        record = find_matching_task(records, task_type, task_id)
        if record is None:
            log_ctx.debug("Task not visible yet", rows=len(records))
            return None
        return task_outcome(task_type, record.task_properties, log.log_time)

    outcome = _attempt()
    if outcome is None:
        try:
            outcome = poll(
                _attempt,
                interval=client.task_poll_interval if interval is None else interval,
                timeout=timeout,
                cancel=cancel,
                description=f"task {log.id} ({task_type.value}) state change",
            )
        except PollTimeoutError:
            metrics.record_poll_outcome("task", "timeout")
            raise

    metrics.record_poll_outcome("task", "success" if outcome else "failure")
    log_ctx.info("Task finished", succeeded=outcome)
    return outcome
