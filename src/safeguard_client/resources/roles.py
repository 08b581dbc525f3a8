"""Role (entitlement) endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AccessPolicy, Identity, Role


def get_roles(client: SafeguardClient, filter_: Filter | None = None) -> list[Role]:
    raw = client.get("Roles" + query_string(filter_))
    return decode_list(raw, Role)


def get_role(
    client: SafeguardClient,
    role_id: int,
    fields: Fields | None = None,
) -> Role:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Roles/{role_id}{query}")
    return decode_model(raw, Role)


def update_role(client: SafeguardClient, role: Role) -> Role:
    raw = client.put(f"Roles/{role.id}", role)
    return decode_model(raw, Role)


def delete_role(client: SafeguardClient, role_id: int) -> None:
    client.delete(f"Roles/{role_id}")


def get_role_members(client: SafeguardClient, role_id: int) -> list[Identity]:
    raw = client.get(f"Roles/{role_id}/Members")
    return decode_list(raw, Identity)


def add_role_members(
    client: SafeguardClient,
    role_id: int,
    members: list[Identity],
) -> list[Identity]:
    raw = client.post(f"Roles/{role_id}/Members/Add", members)
    return decode_list(raw, Identity)


def remove_role_members(
    client: SafeguardClient,
    role_id: int,
    members: list[Identity],
) -> list[Identity]:
    raw = client.post(f"Roles/{role_id}/Members/Remove", members)
    return decode_list(raw, Identity)


def get_role_policies(client: SafeguardClient, role_id: int) -> list[AccessPolicy]:
    raw = client.get(f"Roles/{role_id}/Policies")
    return decode_list(raw, AccessPolicy)
