"""User group endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import UserGroup


def get_user_groups(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[UserGroup]:
    raw = client.get("UserGroups" + query_string(filter_))
    return decode_list(raw, UserGroup)


def get_user_group(
    client: SafeguardClient,
    group_id: int,
    fields: Fields | None = None,
) -> UserGroup:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"UserGroups/{group_id}{query}")
    return decode_model(raw, UserGroup)
