"""CRUD modules for Safeguard resources.

Each module groups the endpoints of one resource type as plain functions
taking the :class:`~safeguard_client.safeguardapi.SafeguardClient` as their
first argument.
"""

from . import (
    access_policies,
    asset_accounts,
    asset_groups,
    asset_partitions,
    assets,
    auth_providers,
    cluster,
    identities,
    identity_providers,
    me,
    policy_accounts,
    policy_assets,
    reports,
    roles,
    user_groups,
    users,
)

__all__ = [
    "access_policies",
    "asset_accounts",
    "asset_groups",
    "asset_partitions",
    "assets",
    "auth_providers",
    "cluster",
    "identities",
    "identity_providers",
    "me",
    "policy_accounts",
    "policy_assets",
    "reports",
    "roles",
    "user_groups",
    "users",
]
