"""Report endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list
from ..safeguardapi.filters import Filter, query_string
from ..safeguardapi.types import AccountTaskData


def get_account_task_schedules(
    client: SafeguardClient,
    task_name: str,
    filter_: Filter | None = None,
) -> list[AccountTaskData]:
    """Fetch the account-task-schedules report for one task type.

    Each row describes an account together with its task history, which is
    where the outcome of an asynchronous account task becomes visible.
    """
    raw = client.get(
        f"Reports/Tasks/AccountTaskSchedules/{task_name}{query_string(filter_)}",
    )
    return decode_list(raw, AccountTaskData)
