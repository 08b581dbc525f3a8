"""Asset partition endpoints, including the partition's password rules."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AccountPasswordRule, AssetPartition


def get_asset_partitions(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AssetPartition]:
    raw = client.get("AssetPartitions" + query_string(filter_))
    return decode_list(raw, AssetPartition)


def get_asset_partition(
    client: SafeguardClient,
    partition_id: int,
    fields: Fields | None = None,
) -> AssetPartition:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AssetPartitions/{partition_id}{query}")
    return decode_model(raw, AssetPartition)


def get_password_rules(
    client: SafeguardClient,
    partition_id: int,
    filter_: Filter | None = None,
) -> list[AccountPasswordRule]:
    """List the password rules an account in this partition can be given."""
    raw = client.get(
        f"AssetPartitions/{partition_id}/PasswordRules" + query_string(filter_),
    )
    return decode_list(raw, AccountPasswordRule)


def delete_asset_partition(client: SafeguardClient, partition_id: int) -> None:
    client.delete(f"AssetPartitions/{partition_id}")
