"""Asset group endpoints."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AssetGroup


def get_asset_groups(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AssetGroup]:
    raw = client.get("AssetGroups" + query_string(filter_))
    return decode_list(raw, AssetGroup)


def get_asset_group(
    client: SafeguardClient,
    group_id: int,
    fields: Fields | None = None,
) -> AssetGroup:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AssetGroups/{group_id}{query}")
    return decode_model(raw, AssetGroup)


def update_asset_group(client: SafeguardClient, group: AssetGroup) -> AssetGroup:
    raw = client.put(f"AssetGroups/{group.id}", group)
    return decode_model(raw, AssetGroup)


def delete_asset_group(client: SafeguardClient, group_id: int) -> None:
    client.delete(f"AssetGroups/{group_id}")
