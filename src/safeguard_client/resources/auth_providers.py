"""Authentication provider endpoints."""

import structlog

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AuthenticationProvider

logger = structlog.get_logger(__name__)


def get_authentication_providers(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AuthenticationProvider]:
    raw = client.get("AuthenticationProviders" + query_string(filter_))
    return decode_list(raw, AuthenticationProvider)


def get_authentication_provider(
    client: SafeguardClient,
    provider_id: int,
    fields: Fields | None = None,
) -> AuthenticationProvider:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AuthenticationProviders/{provider_id}{query}")
    return decode_model(raw, AuthenticationProvider)


def clear_default_authentication_provider(client: SafeguardClient) -> None:
    """Remove the login page default so users pick a provider themselves."""
    logger.info("Clearing default authentication provider")
    client.post("AuthenticationProviders/ClearDefault")


def force_as_default_authentication_provider(
    client: SafeguardClient,
    provider_id: int,
) -> AuthenticationProvider:
    """Make a provider the login page default and return it."""
    logger.info("Setting default authentication provider", provider_id=provider_id)
    raw = client.post(f"AuthenticationProviders/{provider_id}/ForceAsDefault")
    return decode_model(raw, AuthenticationProvider)
