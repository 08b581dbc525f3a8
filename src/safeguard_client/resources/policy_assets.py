"""Policy asset endpoints.

A policy asset is an asset viewed through access policies. Its sub-resources
list the asset groups, directory entries and policies it takes part in.
"""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import (
    AssetGroup,
    AssetPolicy,
    DirectoryServiceEntry,
    PolicyAsset,
)


def get_policy_assets(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[PolicyAsset]:
    raw = client.get("PolicyAssets" + query_string(filter_))
    return decode_list(raw, PolicyAsset)


def get_policy_asset(
    client: SafeguardClient,
    asset_id: int,
    fields: Fields | None = None,
) -> PolicyAsset:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"PolicyAssets/{asset_id}{query}")
    return decode_model(raw, PolicyAsset)


def get_policy_asset_groups(
    client: SafeguardClient,
    asset_id: int,
    filter_: Filter | None = None,
) -> list[AssetGroup]:
    raw = client.get(f"PolicyAssets/{asset_id}/AssetGroups" + query_string(filter_))
    return decode_list(raw, AssetGroup)


def get_directory_service_entries(
    client: SafeguardClient,
    asset_id: int,
    filter_: Filter | None = None,
) -> list[DirectoryServiceEntry]:
    raw = client.get(
        f"PolicyAssets/{asset_id}/DirectoryServiceEntries" + query_string(filter_),
    )
    return decode_list(raw, DirectoryServiceEntry)


def get_asset_policies(
    client: SafeguardClient,
    asset_id: int,
    filter_: Filter | None = None,
) -> list[AssetPolicy]:
    raw = client.get(f"PolicyAssets/{asset_id}/Policies" + query_string(filter_))
    return decode_list(raw, AssetPolicy)
