"""Cluster member endpoints."""

import structlog

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.errors import SafeguardError
from ..safeguardapi.filters import Fields, Filter, FilterOperator, query_string
from ..safeguardapi.types import ClusterMember

logger = structlog.get_logger(__name__)


def get_cluster_members(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[ClusterMember]:
    raw = client.get("Cluster/Members" + query_string(filter_))
    return decode_list(raw, ClusterMember)


def get_cluster_member(
    client: SafeguardClient,
    member_id: str,
    fields: Fields | None = None,
) -> ClusterMember:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"Cluster/Members/{member_id}{query}")
    return decode_model(raw, ClusterMember)


def get_cluster_self(client: SafeguardClient) -> ClusterMember:
    """Return the member the client is talking to."""
    raw = client.get("Cluster/Members/Self")
    return decode_model(raw, ClusterMember)


def get_cluster_leader(client: SafeguardClient) -> ClusterMember:
    """Return the cluster's primary appliance.

    Raises:
        SafeguardError: If the cluster reports no leader or more than one.
    """
    filter_ = Filter()
    filter_.add_filter("IsLeader", FilterOperator.EQUAL, "true")
    leaders = get_cluster_members(client, filter_)
    if len(leaders) != 1:
        logger.error("Unexpected number of cluster leaders", count=len(leaders))
        msg = f"expected exactly one cluster leader, found {len(leaders)}"
        raise SafeguardError(msg)
    return leaders[0]
