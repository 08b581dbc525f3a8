"""Asset endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import Asset, AssetAccount


def get_assets(client: SafeguardClient, filter_: Filter | None = None) -> list[Asset]:
    raw = client.get("Assets" + query_string(filter_))
    return decode_list(raw, Asset)


def get_asset(
    client: SafeguardClient,
    asset_id: int,
    fields: Fields | None = None,
) -> Asset:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Assets/{asset_id}{query}")
    return decode_model(raw, Asset)


def create_asset(client: SafeguardClient, asset: Asset) -> Asset:
    raw = client.post("Assets", asset)
    return decode_model(raw, Asset)


def update_asset(client: SafeguardClient, asset: Asset) -> Asset:
    raw = client.put(f"Assets/{asset.id}", asset)
    return decode_model(raw, Asset)


def delete_asset(client: SafeguardClient, asset_id: int) -> None:
    client.delete(f"Assets/{asset_id}")


def get_asset_accounts(
    client: SafeguardClient,
    asset_id: int,
    filter_: Filter | None = None,
) -> list[AssetAccount]:
    raw = client.get(f"Assets/{asset_id}/Accounts" + query_string(filter_))
    return decode_list(raw, AssetAccount)
