"""User endpoints, including the policy accounts linked to a user."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import PolicyAccount, Role, User


def get_users(client: SafeguardClient, filter_: Filter | None = None) -> list[User]:
    raw = client.get("Users" + query_string(filter_))
    return decode_list(raw, User)


def get_user(
    client: SafeguardClient,
    user_id: int,
    fields: Fields | None = None,
) -> User:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Users/{user_id}{query}")
    return decode_model(raw, User)


def create_user(client: SafeguardClient, user: User) -> User:
    raw = client.post("Users", user)
    return decode_model(raw, User)


def update_user(client: SafeguardClient, user: User) -> User:
    raw = client.put(f"Users/{user.id}", user)
    return decode_model(raw, User)


def delete_user(client: SafeguardClient, user_id: int) -> None:
    client.delete(f"Users/{user_id}")


def get_user_roles(client: SafeguardClient, user_id: int) -> list[Role]:
    raw = client.get(f"Users/{user_id}/Roles")
    return decode_list(raw, Role)


def get_linked_accounts(
    client: SafeguardClient,
    user_id: int,
    filter_: Filter | None = None,
) -> list[PolicyAccount]:
    raw = client.get(f"Users/{user_id}/LinkedPolicyAccounts" + query_string(filter_))
    return decode_list(raw, PolicyAccount)


def add_linked_accounts(
    client: SafeguardClient,
    user_id: int,
    accounts: list[PolicyAccount],
) -> list[PolicyAccount]:
    """Link policy accounts to a user and return the resulting links."""
    raw = client.post(f"Users/{user_id}/LinkedPolicyAccounts/Add", accounts)
    return decode_list(raw, PolicyAccount)


def remove_linked_accounts(
    client: SafeguardClient,
    user_id: int,
    accounts: list[PolicyAccount],
) -> list[PolicyAccount]:
    """Unlink policy accounts from a user and return the remaining links."""
    raw = client.post(f"Users/{user_id}/LinkedPolicyAccounts/Remove", accounts)
    return decode_list(raw, PolicyAccount)
