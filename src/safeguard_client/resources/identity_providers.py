"""Identity provider endpoints."""

import structlog

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import ActivityLog, IdentityProvider

logger = structlog.get_logger(__name__)


def get_identity_providers(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[IdentityProvider]:
    raw = client.get("IdentityProviders" + query_string(filter_))
    return decode_list(raw, IdentityProvider)


def get_identity_provider(
    client: SafeguardClient,
    provider_id: int,
    fields: Fields | None = None,
) -> IdentityProvider:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"IdentityProviders/{provider_id}{query}")
    return decode_model(raw, IdentityProvider)


def create_identity_provider(
    client: SafeguardClient,
    provider: IdentityProvider,
) -> IdentityProvider:
    raw = client.post("IdentityProviders", provider)
    return decode_model(raw, IdentityProvider)


def update_identity_provider(
    client: SafeguardClient,
    provider: IdentityProvider,
) -> IdentityProvider:
    raw = client.put(f"IdentityProviders/{provider.id}", provider)
    return decode_model(raw, IdentityProvider)


def delete_identity_provider(client: SafeguardClient, provider_id: int) -> None:
    client.delete(f"IdentityProviders/{provider_id}")


def synchronize_identity_provider(
    client: SafeguardClient,
    provider_id: int,
) -> ActivityLog:
    """Start a directory synchronization and return its activity log."""
    logger.info("Synchronizing identity provider", provider_id=provider_id)
    raw = client.post(f"IdentityProviders/{provider_id}/Synchronize")
    return decode_model(raw, ActivityLog)
