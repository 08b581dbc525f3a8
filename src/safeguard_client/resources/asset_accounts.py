"""Asset account endpoints and account task actions.

Task actions (password change, SSH key check, suspend, ...) start an
asynchronous job on the appliance and return its :class:`ActivityLog`;
pass that log to :func:`safeguard_client.tasks.check_task_state` to wait
for the outcome.
"""

import structlog

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AccountPasswordRule, ActivityLog, AssetAccount

logger = structlog.get_logger(__name__)


def get_asset_accounts(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AssetAccount]:
    raw = client.get("AssetAccounts" + query_string(filter_))
    return decode_list(raw, AssetAccount)


def get_asset_account(
    client: SafeguardClient,
    account_id: int,
    fields: Fields | None = None,
) -> AssetAccount:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AssetAccounts/{account_id}{query}")
    return decode_model(raw, AssetAccount)


def create_asset_accounts(
    client: SafeguardClient,
    accounts: list[AssetAccount],
) -> list[AssetAccount]:
    """Create several accounts with one batch call."""
    logger.info("Creating asset accounts", count=len(accounts))
    raw = client.post("AssetAccounts/BatchCreate", accounts)
    return decode_list(raw, AssetAccount)


def create_asset_account(client: SafeguardClient, account: AssetAccount) -> AssetAccount:
    return create_asset_accounts(client, [account])[0]


def update_asset_account(client: SafeguardClient, account: AssetAccount) -> AssetAccount:
    raw = client.put(f"AssetAccounts/{account.id}", account)
    return decode_model(raw, AssetAccount)


def delete_asset_account(client: SafeguardClient, account_id: int) -> None:
    client.delete(f"AssetAccounts/{account_id}")


def update_password_profile(
    client: SafeguardClient,
    account: AssetAccount,
    rule: AccountPasswordRule,
) -> AssetAccount:
    """Assign a partition's password rule to an account.

    The account is sent back in full with its profile pointing at ``rule``.
    """
    updated = account.model_copy(update={"password_profile": rule.as_profile()})
    return update_asset_account(client, updated)


# Task actions


def _start_task(client: SafeguardClient, account_id: int, action: str) -> ActivityLog:
    logger.info("Starting account task", account_id=account_id, action=action)
    raw = client.post(f"AssetAccounts/{account_id}/{action}")
    return decode_model(raw, ActivityLog)


def change_password(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "ChangePassword")


def check_password(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "CheckPassword")


def change_ssh_key(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "ChangeSshKey")


def check_ssh_key(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "CheckSshKey")


def suspend_account(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "SuspendAccount")


def restore_account(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "RestoreAccount")


def elevate_account(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "ElevateAccount")


def demote_account(client: SafeguardClient, account_id: int) -> ActivityLog:
    return _start_task(client, account_id, "DemoteAccount")


def enable_account(client: SafeguardClient, account_id: int) -> AssetAccount:
    raw = client.post(f"AssetAccounts/{account_id}/Enable")
    return decode_model(raw, AssetAccount)


def disable_account(client: SafeguardClient, account_id: int) -> AssetAccount:
    raw = client.post(f"AssetAccounts/{account_id}/Disable")
    return decode_model(raw, AssetAccount)
