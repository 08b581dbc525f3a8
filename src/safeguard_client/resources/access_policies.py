"""Access policy endpoints, including approver sets and reviewers."""

from ..safeguardapi.client import SafeguardClient
from ..safeguardapi.decoding import decode_list, decode_model
from ..safeguardapi.filters import Fields, Filter, query_string
from ..safeguardapi.types import AccessPolicy, ApproverSet, Identity, ReasonCode


def get_access_policies(
    client: SafeguardClient,
    filter_: Filter | None = None,
) -> list[AccessPolicy]:
    raw = client.get("AccessPolicies" + query_string(filter_))
    return decode_list(raw, AccessPolicy)


def get_access_policy(
    client: SafeguardClient,
    policy_id: int,
    fields: Fields | None = None,
) -> AccessPolicy:
    query = fields.to_query_string() if fields else ""
    raw = client.get(f"AccessPolicies/{policy_id}{query}")
    return decode_model(raw, AccessPolicy)


def update_access_policy(client: SafeguardClient, policy: AccessPolicy) -> AccessPolicy:
    raw = client.put(f"AccessPolicies/{policy.id}", policy)
    return decode_model(raw, AccessPolicy)


def delete_access_policy(client: SafeguardClient, policy_id: int) -> None:
    client.delete(f"AccessPolicies/{policy_id}")


def get_reason_codes(client: SafeguardClient, policy_id: int) -> list[ReasonCode]:
    """Return the reason codes of a policy; empty when it has none."""
    return get_access_policy(client, policy_id).get_reason_codes()


# Approver sets


def get_approver_sets(client: SafeguardClient, policy_id: int) -> list[ApproverSet]:
    raw = client.get(f"AccessPolicies/{policy_id}/ApproverSets")
    return decode_list(raw, ApproverSet)


def set_approver_sets(
    client: SafeguardClient,
    policy_id: int,
    approver_sets: list[ApproverSet],
) -> list[ApproverSet]:
    """Replace all approver sets of a policy."""
    raw = client.put(f"AccessPolicies/{policy_id}/ApproverSets", approver_sets)
    return decode_list(raw, ApproverSet)


def add_approver_sets(
    client: SafeguardClient,
    policy_id: int,
    approver_sets: list[ApproverSet],
) -> list[ApproverSet]:
    raw = client.post(f"AccessPolicies/{policy_id}/ApproverSets/Add", approver_sets)
    return decode_list(raw, ApproverSet)


def remove_approver_sets(
    client: SafeguardClient,
    policy_id: int,
    approver_sets: list[ApproverSet],
) -> list[ApproverSet]:
    raw = client.post(
        f"AccessPolicies/{policy_id}/ApproverSets/Remove",
        approver_sets,
    )
    return decode_list(raw, ApproverSet)


# Reviewers


def get_reviewers(client: SafeguardClient, policy_id: int) -> list[Identity]:
    raw = client.get(f"AccessPolicies/{policy_id}/Reviewers")
    return decode_list(raw, Identity)


def add_reviewers(
    client: SafeguardClient,
    policy_id: int,
    reviewers: list[Identity],
) -> list[Identity]:
    raw = client.post(f"AccessPolicies/{policy_id}/Reviewers/Add", reviewers)
    return decode_list(raw, Identity)


def remove_reviewers(
    client: SafeguardClient,
    policy_id: int,
    reviewers: list[Identity],
) -> list[Identity]:
    raw = client.post(f"AccessPolicies/{policy_id}/Reviewers/Remove", reviewers)
    return decode_list(raw, Identity)
