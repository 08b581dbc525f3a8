"""Policy account endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import PolicyAccount


def get_policy_accounts(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[PolicyAccount]:
    raw = client.get("PolicyAccounts" + query_string(filter_))
    return decode_list(raw, PolicyAccount)


def get_policy_account(
    client: SafeguardClient,
    account_id: int,
    fields: Fields | None = None,
) -> PolicyAccount:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"PolicyAccounts/{account_id}{query}")
    return decode_model(raw, PolicyAccount)
