"""Resource types for the Safeguard REST API.

Pydantic models mirroring the JSON records returned by the appliance.
Attributes are snake_case; the wire form is PascalCase and is produced by
``model_dump(by_alias=True)``. Unknown wire fields are ignored and missing
ones fall back to defaults, so partial responses (``fields=...``) validate.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal


class SafeguardModel(BaseModel):
    """Base model mapping snake_case attributes to PascalCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Null means unset; let the field default apply
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def is_set(value: datetime | None) -> bool:
    """Return True for a real timestamp.

    The appliance reports "never" either as null or as the year-one
    placeholder ``0001-01-01T00:00:00``.
    """
    return value is not None and value.year > 1


# Enumerations


class AccessRequestState(str, Enum):
    """Server-side state of an access request."""

    NEW = "New"
    PENDING_APPROVAL = "PendingApproval"
    PENDING_TIME_REQUESTED = "PendingTimeRequested"
    PENDING_ACCOUNT_RESTORED = "PendingAccountRestored"
    PENDING_ACCOUNT_ELEVATED = "PendingAccountElevated"
    REQUEST_AVAILABLE = "RequestAvailable"
    PASSWORD_CHECKED_OUT = "PasswordCheckedOut"
    PASSWORD_CHECKED_IN = "PasswordCheckedIn"
    PENDING_REVIEW = "PendingReview"
    PENDING_PASSWORD_RESET = "PendingPasswordReset"
    EXPIRED = "Expired"
    DENIED = "Denied"
    CANCELED = "Canceled"
    REVOKED = "Revoked"
    PENDING_ACKNOWLEDGMENT = "PendingAcknowledgment"
    ACKNOWLEDGED = "Acknowledged"
    COMPLETE = "Complete"
    PENDING = "Pending"

    def __str__(self) -> str:
        return self.value


class AccessRequestType(str, Enum):
    """Kind of credential or session an access request asks for."""

    PASSWORD = "Password"
    SSH = "SSH"
    SSH_KEY = "SSHKey"
    API_KEY = "APIKey"
    RDP = "RDP"
    REMOTE_DESKTOP = "RemoteDesktop"
    FILE = "File"
    TELNET = "Telnet"


class AccessRequestRole(str, Enum):
    """Role the current user holds on an actionable access request."""

    REQUESTER = "Requester"
    APPROVER = "Approver"
    REVIEWER = "Reviewer"
    ADMIN = "Admin"
    WATCHER = "Watcher"
    MONITOR = "Monitor"


class TaskName(str, Enum):
    """Names of asynchronous account tasks run by the appliance."""

    ARCHIVE = "Archive"
    CHANGE_API_KEY = "ChangeApiKey"
    CHANGE_FILE = "ChangeFile"
    CHANGE_PASSWORD = "ChangePassword"
    CHANGE_SSH_KEY = "ChangeSshKey"
    CHECK_API_KEY = "CheckApiKey"
    CHECK_FILE = "CheckFile"
    CHECK_PASSWORD = "CheckPassword"
    CHECK_SSH_KEY = "CheckSshKey"
    DEMOTE_ACCOUNT = "DemoteAccount"
    DIRECTORY_ASSET_DELETE_SYNC = "DirectoryAssetDeleteSync"
    DIRECTORY_ASSET_SYNC = "DirectoryAssetSync"
    DIRECTORY_PROVIDER_DELETE_SYNC = "DirectoryProviderDeleteSync"
    DIRECTORY_PROVIDER_SYNC = "DirectoryProviderSync"
    DISCOVER_ACCOUNTS = "DiscoverAccounts"
    DISCOVER_ASSETS = "DiscoverAssets"
    DISCOVER_SERVICES = "DiscoverServices"
    DISCOVER_SSH_HOST_KEY = "DiscoverSshHostKey"
    DISCOVER_SSH_KEYS = "DiscoverSshKeys"
    ELEVATE_ACCOUNT = "ElevateAccount"
    INSTALL_SSH_KEY = "InstallSshKey"
    LOCAL_IDENTITY_PROVIDER_SYNC = "LocalIdentityProviderSync"
    PASSWORD_SYNC_ACCOUNTS = "PasswordSyncAccounts"
    RESTORE_ACCOUNT = "RestoreAccount"
    RETRIEVE_SSH_HOST_KEY = "RetrieveSshHostKey"
    REVOKE_SSH_KEY = "RevokeSshKey"
    SSH_KEY_SYNC_ACCOUNTS = "SshKeySyncAccounts"
    SUSPEND_ACCOUNT = "SuspendAccount"
    TEST_CONNECTION = "TestConnection"
    UNKNOWN = "Unknown"
    UPDATE_DEPENDENT_ASSET = "UpdateDependentAsset"


# Shared building blocks


class Identity(SafeguardModel):
    """A user or group principal as referenced by other resources."""

    id: int = 0
    name: str = ""
    display_name: str = ""
    full_display_name: str = ""
    principal_kind: str = ""
    email_address: str | None = None
    domain_name: str | None = None
    identity_provider_id: int = 0
    identity_provider_name: str = ""
    identity_provider_type_reference_name: str = ""
    is_system_owned: bool = False


class Tag(SafeguardModel):
    id: int = 0
    name: str = ""
    description: str = ""
    admin_assigned: bool = False


class Profile(SafeguardModel):
    id: int = 0
    name: str = ""
    effective_id: int = 0
    effective_name: str = ""


class Platform(SafeguardModel):
    id: int = 0
    platform_type: str = ""
    display_name: str = ""
    platform_family: str = ""
    is_acct_name_case_sensitive: bool = False
    supports_session_management: bool = False


class RequestProperties(SafeguardModel):
    allow_password_request: bool = False
    allow_session_request: bool = False
    allow_ssh_key_request: bool = False
    allow_api_key_request: bool = False
    allow_file_request: bool = False


class HourlyRestrictionProperties(SafeguardModel):
    enable_hourly_restrictions: bool = False
    monday_valid_hours: list[int] | None = None
    tuesday_valid_hours: list[int] | None = None
    wednesday_valid_hours: list[int] | None = None
    thursday_valid_hours: list[int] | None = None
    friday_valid_hours: list[int] | None = None
    saturday_valid_hours: list[int] | None = None
    sunday_valid_hours: list[int] | None = None


# Users


class User(SafeguardModel):
    """An appliance user account."""

    id: int = 0
    name: str = ""
    display_name: str = ""
    first_name: str = ""
    last_name: str = ""
    description: str = ""
    email_address: str = ""
    work_phone: str = ""
    mobile_phone: str = ""
    admin_roles: list[str] = Field(default_factory=list)
    disabled: bool = False
    locked: bool = False
    password_never_expires: bool = False
    change_password_at_next_login: bool = False
    is_system_owned: bool = False
    is_requester: bool = False
    is_approver: bool = False
    is_reviewer: bool = False
    is_partition_owner: bool = False
    allow_personal_accounts: bool = False
    time_zone_id: str = ""
    identity_provider: Identity | None = None
    last_login_date: datetime | None = None
    created_date: datetime | None = None
    created_by_user_id: int = 0
    linked_accounts_count: int = 0


class GroupIdentityProvider(SafeguardModel):
    id: int = 0
    name: str = ""
    type_reference_name: str = ""
    identity_id: str = ""


class DirectoryGroupSyncProperties(SafeguardModel):
    primary_authentication_provider_id: int = 0
    primary_authentication_provider_type_reference_name: str = ""
    primary_authentication_provider_name: str = ""
    require_certificate_authentication: bool = False
    secondary_authentication_provider_id: int = 0
    secondary_authentication_provider_type_reference_name: str = ""
    secondary_authentication_provider_name: str = ""
    link_directory_accounts: bool = False
    allow_personal_accounts: bool = False
    admin_roles: list[str] = Field(default_factory=list)


class UserGroup(SafeguardModel):
    """A local or directory-synchronized group of users."""

    id: int = 0
    name: str = ""
    description: str = ""
    identity_provider: GroupIdentityProvider | None = None
    is_read_only: bool = False
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""
    modified_date: datetime | None = None
    modified_by_user_id: int = 0
    modified_by_user_display_name: str = ""
    members: list[User] = Field(default_factory=list)
    directory_group_sync_properties: DirectoryGroupSyncProperties | None = None


# Assets and accounts


class Asset(SafeguardModel):
    """A managed system (server, directory, device)."""

    id: int = 0
    name: str = ""
    description: str = ""
    network_address: str = ""
    asset_partition_id: int = 0
    asset_partition_name: str = ""
    platform_id: int = 0
    platform: Platform | None = None
    disabled: bool = False
    tags: list[Tag] = Field(default_factory=list)
    created_date: datetime | None = None


class AccountAsset(SafeguardModel):
    """The asset summary embedded in account records."""

    id: int = 0
    name: str = ""
    network_address: str = ""
    asset_partition_id: int = 0
    asset_partition_name: str = ""


class TaskProperties(SafeguardModel):
    """Per-task-type history of an account's asynchronous jobs."""

    has_account_task_failure: bool = False

    # Password check
    last_password_check_date: datetime | None = None
    last_success_password_check_date: datetime | None = None
    last_failure_password_check_date: datetime | None = None
    last_password_check_task_id: str = ""
    failed_password_check_attempts: int = 0
    next_password_check_date: datetime | None = None

    # Password change
    last_password_change_date: datetime | None = None
    last_success_password_change_date: datetime | None = None
    last_failure_password_change_date: datetime | None = None
    last_password_change_task_id: str = ""
    failed_password_change_attempts: int = 0
    next_password_change_date: datetime | None = None

    # SSH key check
    last_ssh_key_check_date: datetime | None = None
    last_success_ssh_key_check_date: datetime | None = None
    last_failure_ssh_key_check_date: datetime | None = None
    last_ssh_key_check_task_id: str = ""
    failed_ssh_key_check_attempts: int = 0
    next_ssh_key_check_date: datetime | None = None

    # SSH key change
    last_ssh_key_change_date: datetime | None = None
    last_success_ssh_key_change_date: datetime | None = None
    last_failure_ssh_key_change_date: datetime | None = None
    last_ssh_key_change_task_id: str = ""
    failed_ssh_key_change_attempts: int = 0
    next_ssh_key_change_date: datetime | None = None

    # SSH key discovery
    last_ssh_key_discovery_date: datetime | None = None
    last_success_ssh_key_discovery_date: datetime | None = None
    last_failure_ssh_key_discovery_date: datetime | None = None
    last_ssh_key_discovery_task_id: str = ""
    failed_ssh_key_discovery_attempts: int = 0
    next_ssh_key_discovery_date: datetime | None = None

    # SSH key revoke
    last_ssh_key_revoke_date: datetime | None = None
    last_success_ssh_key_revoke_date: datetime | None = None
    last_failure_ssh_key_revoke_date: datetime | None = None
    last_ssh_key_revoke_task_id: str = ""
    failed_ssh_key_revoke_attempts: int = 0

    # Suspend / restore
    last_suspend_account_date: datetime | None = None
    last_success_suspend_account_date: datetime | None = None
    last_failure_suspend_account_date: datetime | None = None
    last_suspend_account_task_id: str = ""
    failed_suspend_account_attempts: int = 0
    next_suspend_account_date: datetime | None = None
    last_restore_account_date: datetime | None = None
    last_success_restore_account_date: datetime | None = None
    last_failure_restore_account_date: datetime | None = None
    last_restore_account_task_id: str = ""
    failed_restore_account_attempts: int = 0
    next_restore_account_date: datetime | None = None

    # Demote / elevate
    last_demote_account_date: datetime | None = None
    last_success_demote_account_date: datetime | None = None
    last_failure_demote_account_date: datetime | None = None
    last_demote_account_task_id: str = ""
    failed_demote_account_attempts: int = 0
    next_demote_account_date: datetime | None = None
    last_elevate_account_date: datetime | None = None
    last_success_elevate_account_date: datetime | None = None
    last_failure_elevate_account_date: datetime | None = None
    last_elevate_account_task_id: str = ""
    failed_elevate_account_attempts: int = 0
    next_elevate_account_date: datetime | None = None

    # Files
    last_file_check_date: datetime | None = None
    last_success_file_check_date: datetime | None = None
    last_failure_file_check_date: datetime | None = None
    last_file_check_task_id: str = ""
    failed_file_check_attempts: int = 0
    last_file_change_date: datetime | None = None
    last_success_file_change_date: datetime | None = None
    last_failure_file_change_date: datetime | None = None
    last_file_change_task_id: str = ""
    failed_file_change_attempts: int = 0

    # API keys only report failure counters
    failed_api_key_check_attempts: int = 0
    failed_api_key_change_attempts: int = 0


class AssetAccount(SafeguardModel):
    """An account that lives on a managed asset."""

    id: int = 0
    name: str = ""
    distinguished_name: str = ""
    domain_name: str = ""
    account_namespace: str = ""
    description: str = ""
    alt_login_name: str = ""
    privilege_group_membership_list: list[str] = Field(default_factory=list)
    disabled: bool = False
    is_service_account: bool = False
    is_application_account: bool = False
    shared_service_account: bool = False
    tags: list[Tag] = Field(default_factory=list)
    asset: AccountAsset | None = None
    password_profile: Profile | None = None
    ssh_key_profile: Profile | None = None
    request_properties: RequestProperties | None = None
    platform: Platform | None = None
    has_password: bool = False
    has_ssh_key: bool = False
    has_totp_authenticator: bool = False
    has_api_keys: bool = False
    has_file: bool = False
    task_properties: TaskProperties = Field(default_factory=TaskProperties)
    created_date: datetime | None = None
    created_by_user_id: int = 0


class PolicyAccount(SafeguardModel):
    """An account as seen through the access policies that grant it."""

    id: int = 0
    name: str = ""
    description: str = ""
    domain_name: str = ""
    distinguished_name: str = ""
    net_bios_name: str = ""
    account_type: str = ""
    alt_login_name: str = ""
    disabled: bool = False
    is_service_account: bool = False
    is_application_account: bool = False
    has_password: bool = False
    has_ssh_key: bool = False
    has_totp_authenticator: bool = False
    has_api_keys: bool = False
    has_file: bool = False
    linked_users_count: int = 0
    request_properties: RequestProperties | None = None
    platform: Platform | None = None
    asset: AccountAsset | None = None


# Asset partitions and password rules


class AssetPartition(SafeguardModel):
    """A delegated administration boundary holding assets and their profiles."""

    id: int = 0
    name: str = ""
    description: str = ""
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""
    managed_by: list[Identity] = Field(default_factory=list)
    default_profile_id: int = 0
    default_profile_name: str = ""
    default_ssh_key_profile_id: int = 0
    default_ssh_key_profile_name: str = ""


class AccountPasswordRule(SafeguardModel):
    """Password composition rule defined in an asset partition."""

    id: int = 0
    is_system_owned: bool = False
    asset_partition_id: int = 0
    asset_partition_name: str = ""
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""
    name: str = ""
    description: str = ""
    max_characters: int = 0
    min_characters: int = 0
    allow_uppercase_characters: bool = False
    min_uppercase_characters: int = 0
    invalid_uppercase_characters: list[str] = Field(default_factory=list)
    max_consecutive_uppercase_characters: int = 0
    allow_lowercase_characters: bool = False
    min_lowercase_characters: int = 0
    invalid_lowercase_characters: list[str] = Field(default_factory=list)
    max_consecutive_lowercase_characters: int = 0
    allow_numeric_characters: bool = False
    min_numeric_characters: int = 0
    invalid_numeric_characters: list[str] = Field(default_factory=list)
    max_consecutive_numeric_characters: int = 0
    allow_non_alpha_numeric_characters: bool = False
    min_non_alpha_numeric_characters: int = 0
    non_alpha_numeric_restriction_type: str = ""
    allowed_non_alpha_numeric_characters: list[str] = Field(default_factory=list)
    invalid_non_alpha_numeric_characters: list[str] = Field(default_factory=list)
    max_consecutive_non_alpha_numeric_characters: int = 0
    allowed_first_character_type: str = ""
    allowed_last_character_type: str = ""
    max_consecutive_alphabetic_characters: int = 0
    max_consecutive_alpha_numeric_characters: int = 0
    repeated_character_restriction: str = ""

    def as_profile(self) -> Profile:
        """The profile reference an account carries once this rule is assigned."""
        return Profile(id=self.id, name=self.name, effective_id=self.id)


# Asset groups and policy assets


class TaggingGroupingCondition(SafeguardModel):
    object_attribute: str = ""
    compare_type: str = ""
    compare_value: str = ""


class RuleConditionOrGroup(SafeguardModel):
    tagging_grouping_condition: TaggingGroupingCondition | None = None
    tagging_grouping_condition_group: str | None = None


class RuleConditionGroup(SafeguardModel):
    logical_join_type: str = ""
    children: list[RuleConditionOrGroup] = Field(default_factory=list)


class AssetGroupingRule(SafeguardModel):
    description: str = ""
    enabled: bool = False
    rule_condition_group: RuleConditionGroup = Field(
        default_factory=RuleConditionGroup,
    )


class AssetSshHostKey(SafeguardModel):
    id: int = 0
    fingerprint: str = ""
    key: str = ""
    key_type: str = ""
    comment: str = ""
    can_be_accepted: bool = False
    ssh_host_key: str = ""
    fingerprint_sha256: str = ""


class SessionAccessProperties(SafeguardModel):
    allow_session_requests: bool = False
    ssh_session_port: int = 0
    remote_desktop_session_port: int = 0
    telnet_session_port: int = 0


class PolicyAsset(SafeguardModel):
    """An asset as seen through the access policies that grant it."""

    id: int = 0
    name: str = ""
    asset_type: str = ""
    network_address: str = ""
    description: str = ""
    asset_partition_id: int = 0
    asset_partition_name: str = ""
    domain_name: str = ""
    disabled: bool = False
    platform: Platform | None = None
    ssh_host_key: AssetSshHostKey | None = None
    session_access_properties: SessionAccessProperties | None = None


class AssetGroup(SafeguardModel):
    """A static or rule-based group of session-capable assets."""

    id: int = 0
    name: str = ""
    description: str = ""
    is_dynamic: bool = False
    assets: list[PolicyAsset] = Field(default_factory=list)
    asset_grouping_rule: AssetGroupingRule | None = None
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""


class AssetPolicyMembership(SafeguardModel):
    policy_id: int = 0
    asset_id: int = 0
    policy_member_id: int = 0
    policy_member_name: str = ""
    policy_member_is_asset_group: bool = False
    policy_member_is_account_group: bool = False


class AssetPolicy(SafeguardModel):
    """A policy an asset belongs to, with how the membership was granted."""

    policy_id: int = 0
    policy_name: str = ""
    access_request_type: str = ""
    role_id: int = 0
    role_name: str = ""
    asset_id: int = 0
    asset_name: str = ""
    policy_account_count: int = 0
    policy_account_group_count: int = 0
    policy_asset_count: int = 0
    policy_asset_group_count: int = 0
    membership: list[AssetPolicyMembership] = Field(default_factory=list)


class DirectoryProperties(SafeguardModel):
    directory_id: int = 0
    directory_name: str = ""
    domain_name: str = ""
    netbios_name: str = ""
    distinguished_name: str = ""
    object_guid: str = ""
    object_sid: str = ""


class DirectoryServiceEntry(SafeguardModel):
    name: str = ""
    directory_properties: DirectoryProperties | None = None


# Access policies and roles


class ApproverSet(SafeguardModel):
    required_approvers: int = 0
    approvers: list[Identity] = Field(default_factory=list)


class ReasonCode(SafeguardModel):
    id: int = 0
    name: str = ""
    description: str = ""
    category: str = ""


class RequesterProperties(SafeguardModel):
    """Release-duration limits and requirements a policy places on requesters."""

    default_release_duration_days: int = 0
    default_release_duration_hours: int = 0
    default_release_duration_minutes: int = 0
    maximum_release_duration_days: int = 0
    maximum_release_duration_hours: int = 0
    maximum_release_duration_minutes: int = 0
    allow_custom_duration: bool = False
    require_reason_code: bool = False
    require_reason_comment: bool = False
    require_service_ticket: bool = False

    @property
    def default_release_duration(self) -> timedelta:
        return timedelta(
            days=self.default_release_duration_days,
            hours=self.default_release_duration_hours,
            minutes=self.default_release_duration_minutes,
        )

    @property
    def maximum_release_duration(self) -> timedelta:
        return timedelta(
            days=self.maximum_release_duration_days,
            hours=self.maximum_release_duration_hours,
            minutes=self.maximum_release_duration_minutes,
        )


class AccessRequestProperties(SafeguardModel):
    access_request_type: str = ""
    allow_simultaneous_access: bool = False
    maximum_simultaneous_releases: int = 0
    change_password_after_checkin: bool = False
    change_ssh_key_after_checkin: bool = False
    allow_session_password_release: bool = False
    include_password_release: bool = False
    terminate_expired_sessions: bool = False
    use_alt_login_name: bool = False


class EmergencyAccessProperties(SafeguardModel):
    allow_emergency_access: bool = False
    ignore_hourly_restrictions: bool = False


class AccessPolicy(SafeguardModel):
    """An entitlement policy describing who may request what and how."""

    id: int = 0
    name: str = ""
    description: str = ""
    role_id: int = 0
    role_name: str = ""
    role_priority: int = 0
    priority: int = 0
    account_count: int = 0
    asset_count: int = 0
    account_group_count: int = 0
    asset_group_count: int = 0
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""
    requester_properties: RequesterProperties = Field(
        default_factory=RequesterProperties,
    )
    access_request_properties: AccessRequestProperties = Field(
        default_factory=AccessRequestProperties,
    )
    emergency_access_properties: EmergencyAccessProperties = Field(
        default_factory=EmergencyAccessProperties,
    )
    approver_sets: list[ApproverSet] | None = None
    reviewers: list[Identity] | None = None
    reason_codes: list[ReasonCode] | None = None
    expiration_date: datetime | None = None
    is_expired: bool = False
    invalid_connection_policy: bool = False
    hourly_restriction_properties: HourlyRestrictionProperties | None = None

    def get_reason_codes(self) -> list[ReasonCode]:
        """Return the policy's reason codes, or an empty list when unset."""
        return list(self.reason_codes or [])


class Role(SafeguardModel):
    """An entitlement: a set of members bound to access policies."""

    id: int = 0
    name: str = ""
    priority: int = 0
    description: str = ""
    expiration_date: datetime | None = None
    is_expired: bool = False
    has_expired_policies: bool = False
    has_invalid_policies: bool = False
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""
    user_count: int = 0
    account_count: int = 0
    asset_count: int = 0
    policy_count: int = 0
    hourly_restriction_properties: HourlyRestrictionProperties | None = None
    members: list[Identity] = Field(default_factory=list)


# Identity providers


class IdentityProvider(SafeguardModel):
    """An authentication or directory provider configured on the appliance."""

    id: int = 0
    type_reference_name: str = ""
    name: str = ""
    description: str = ""
    network_address: str = ""
    is_system_owned: bool = False
    is_directory: bool = False
    rsts_provider_id: str = ""
    rsts_provider_scope: str = ""
    created_date: datetime | None = None
    created_by_user_id: int = 0
    created_by_user_display_name: str = ""


# Cluster


class HealthDetail(SafeguardModel):
    name: str = ""
    status: str = ""
    description: str = ""


class NodeHealth(SafeguardModel):
    status: str = ""
    details: list[HealthDetail] = Field(default_factory=list)
    last_update_time: datetime | None = None


class NodeNetworkInformation(SafeguardModel):
    netmask: str = ""
    gateway: str = ""
    dns_servers: str = ""
    using_dhcp: bool = False
    interface_alias: str = ""


class ClusterMember(SafeguardModel):
    """One appliance in a Safeguard cluster."""

    id: str = ""
    name: str = ""
    network_address: str = ""
    description: str = ""
    is_leader: bool = False
    version: str = ""
    patch_version: str = ""
    state: str = ""
    enrollment_date: datetime | None = None
    is_enrolled: bool = False
    health: NodeHealth | None = None
    network_information: NodeNetworkInformation | None = None


# Access requests


class ReasonCodeInfo(SafeguardModel):
    id: int = 0
    name: str = ""
    description: str = ""


class DateTimeInterval(SafeguardModel):
    begin: datetime | None = None
    end: datetime | None = None


class WorkflowAction(SafeguardModel):
    """One entry of an access request's state-transition history."""

    action_type: str = ""
    comment: str | None = None
    old_state: str = ""
    new_state: str = ""
    occurred_on: datetime | None = None
    user: Identity | None = None
    session_id: str | None = None


class AccessRequestSession(SafeguardModel):
    id: str = ""
    access_request_id: str = ""
    session_id: int = 0
    state: str = ""
    launched_by_user_id: int = 0
    launched_by_user_display_name: str = ""
    session_started: datetime | None = None
    session_end: datetime | None = None
    appliance_name: str = ""
    psm_key: str = Field("", alias="PSMKey")
    is_terminated: bool = False
    has_recording: bool = False


class AccessRequest(SafeguardModel):
    """A time-boxed request for access to an account on an asset.

    Instances are snapshots. Use the functions in
    :mod:`safeguard_client.access_requests` to act on a request; each
    returns a fresh snapshot.
    """

    id: str = ""
    access_request_type: str = ""
    state: AccessRequestState | None = None

    # Target
    account_id: int = 0
    account_name: str = ""
    account_domain_name: str = ""
    account_distinguished_name: str = ""
    account_asset_id: int = 0
    account_asset_name: str = ""
    asset_id: int = 0
    asset_name: str = ""
    asset_network_address: str | None = None
    asset_platform_type: str = ""

    # Requester
    requester_id: int = 0
    requester_username: str = ""
    requester_display_name: str = ""
    requested_for: str = ""

    # Duration and timing
    duration_in_minutes: int = 0
    requested_duration_days: int = 0
    requested_duration_hours: int = 0
    requested_duration_minutes: int = 0
    created_on: datetime | None = None
    expires_on: datetime | None = None
    state_changed_on: datetime | None = None
    request_availability: list[DateTimeInterval] = Field(default_factory=list)

    # Workflow
    reason_code: ReasonCodeInfo | None = None
    reason_comment: str | None = None
    ticket_number: str | None = None
    is_emergency: bool = False
    needs_acknowledgement: bool = False
    policy_id: int = 0
    policy_name: str = ""
    current_approval_count: int = 0
    required_approval_count: int = 0
    current_reviewer_count: int = 0
    required_reviewer_count: int = 0
    workflow_actions: list[WorkflowAction] = Field(default_factory=list)
    sessions: list[AccessRequestSession] = Field(default_factory=list)

    # Outcome flags
    was_cancelled: bool = False
    was_checked_out: bool = False
    was_denied: bool = False
    was_evicted: bool = False
    was_expired: bool = False
    was_revoked: bool = False


class BatchError(SafeguardModel):
    code: int = 0
    message: str = ""
    inner_error: str | None = None


class BatchRequest(SafeguardModel):
    """The part of a submitted request echoed back in a batch response."""

    account_id: int = 0
    asset_id: int = 0
    access_request_type: str = ""
    is_emergency: bool = False
    reason_code_id: int = 0
    reason_comment: str = ""
    requested_duration_days: int = 0
    requested_duration_hours: int = 0
    requested_duration_minutes: int = 0
    requested_for: str = ""
    ticket_number: str = ""


class AccessRequestBatchResponse(SafeguardModel):
    """One entry of a batch create response, in submission order."""

    response: AccessRequest = Field(default_factory=AccessRequest)
    status_code: str = ""
    status_code_number: int = 0
    is_success: bool = False
    error: BatchError | None = None
    request: BatchRequest | None = None


class NewAccessRequest(SafeguardModel):
    """Payload submitted for each entry of a batch create."""

    access_request_type: str = ""
    account_id: int = 0
    asset_id: int = 0
    requested_duration_days: int = 0
    requested_duration_hours: int = 0
    requested_duration_minutes: int = 0
    requester_username: str = ""
    reason_code: str = ""
    reason_comment: str = ""
    is_emergency: bool = False


# Entitlements


class AccountInfo(SafeguardModel):
    id: int = 0
    name: str = ""
    domain_name: str = ""
    description: str | None = None
    has_password: bool = False
    has_ssh_key: bool = False
    has_api_key: bool = False
    has_file: bool = False
    disabled: bool = False
    asset_id: int = 0
    asset_name: str = ""
    asset_network_address: str | None = None
    allow_password_request: bool = False
    allow_session_request: bool = False
    allow_ssh_key_request: bool = False
    tags: list[str] = Field(default_factory=list)


class AssetInfo(SafeguardModel):
    id: int = 0
    name: str = ""
    domain_name: str | None = None
    description: str | None = None
    network_address: str | None = None
    platform_display_name: str = ""
    platform_type: str = ""
    tags: list[str] = Field(default_factory=list)


class PolicyInfo(SafeguardModel):
    id: int = 0
    name: str = ""
    priority: int = 0
    role_priority: int = 0
    access_request_type: str = ""
    allow_simultaneous_access: bool = False
    maximum_simultaneous_releases: int = 0
    requester_properties: RequesterProperties = Field(
        default_factory=RequesterProperties,
    )
    emergency_access_properties: EmergencyAccessProperties | None = None
    effective_expiration_date: str | None = None
    reason_codes: list[str] = Field(default_factory=list)


class AccountEntitlement(SafeguardModel):
    """An (account, asset, policies) triple the current user may request."""

    account: AccountInfo = Field(default_factory=AccountInfo)
    asset: AssetInfo = Field(default_factory=AssetInfo)
    policies: list[PolicyInfo] = Field(default_factory=list)
    active_requests: list[AccessRequest] = Field(default_factory=list)

    @property
    def access_request_type(self) -> str:
        """The first policy's access request type, or "" without policies."""
        if not self.policies:
            return ""
        return self.policies[0].access_request_type


# Activity logs and task reports


class RequestStatus(SafeguardModel):
    state: str = ""
    percent_complete: int = 0
    cancellable: bool = False
    accepted_time: datetime | None = None
    started_time: datetime | None = None
    completed_time: datetime | None = None
    message: str = ""


class LogEntry(SafeguardModel):
    timestamp: datetime | None = None
    status: str = ""
    message: str = ""


class ActivityLog(SafeguardModel):
    """Record of an asynchronous account task accepted by the appliance.

    ``name`` holds the task type (e.g. ``ChangePassword``) and ``id`` the
    task id later reported in the account's :class:`TaskProperties`.
    """

    id: str = ""
    log_time: datetime | None = None
    user_id: int = 0
    appliance_id: str = ""
    appliance_name: str = ""
    event_name: str = ""
    event_display_name: str = ""
    name: str = ""
    asset_id: int = 0
    asset_name: str = ""
    account_id: int = 0
    account_name: str = ""
    account_domain_name: str = ""
    network_address: str = ""
    request_status: RequestStatus | None = None
    log: list[LogEntry] = Field(default_factory=list)


class AccountTaskData(SafeguardModel):
    """An account's row in the account-task-schedules report."""

    id: int = 0
    name: str = ""
    distinguished_name: str = ""
    domain_name: str = ""
    description: str = ""
    disabled: bool = False
    asset: AccountAsset | None = None
    platform: Platform | None = None
    task_properties: TaskProperties = Field(default_factory=TaskProperties)

    # The report emits these in camelCase
    asset_name: str = Field("", alias="assetName")
    account_name: str = Field("", alias="accountName")
    account_domain_name: str = Field("", alias="accountDomainName")
    account_distinguished_name: str = Field("", alias="accountDistinguishedName")
    task_name: str = Field("", alias="taskName")
    status: str = Field("", alias="status")
    last_executed: datetime | None = Field(None, alias="lastExecuted")
    next_scheduled: datetime | None = Field(None, alias="nextScheduled")
    error_message: str = Field("", alias="errorMessage")


# Authentication


class RstsTokenResponse(BaseModel):
    """OAuth2 token issued by the appliance's embedded STS."""

    access_token: str
    token_type: str = ""


class LoginResponse(SafeguardModel):
    """Exchange of an STS access token for an API user token."""

    status: str = ""
    user_token: str = ""


class AuthenticationProvider(SafeguardModel):
    """A primary or secondary login method configured on the appliance."""

    id: int = 0
    name: str = ""
    type_reference_name: str = ""
    identity_provider_id: int = 0
    identity: str = ""
    rsts_provider_id: str = ""
    rsts_provider_scope: str = ""
    is_default: bool = Field(False, alias="ForceAsDefault")
