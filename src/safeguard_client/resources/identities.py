"""Identity endpoints (users and groups across all identity providers)."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import Identity


def get_identities(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[Identity]:
    raw = client.get("Identities" + query_string(filter_))
    return decode_list(raw, Identity)


def get_identity(
    client: SafeguardClient,
    identity_id: int,
    fields: Fields | None = None,
) -> Identity:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Identities/{identity_id}{query}")
    return decode_model(raw, Identity)
