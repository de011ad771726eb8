"""
Run configuration and provisioning state.

This module holds the value types that flow through the provisioning
pipeline. Instead of a process-wide "what to delete" variable, the
pipeline threads an explicit ProvisioningLedger from the executor to
the cleanup coordinator.

Lifecycle:
    1. RunConfig is loaded once at startup (see config_loader)
    2. The planner turns it into immutable ResourceDescriptors
    3. The executor appends a ProvisionedResource per successful create
    4. The cleanup coordinator drains the ledger newest-first
    5. The ledger is discarded with the process (no persistence)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from diagnostics_deployer import constants as CONSTANTS


class ResourceKind(Enum):
    """Kinds of Azure resources the pipeline knows how to provision."""

    RESOURCE_GROUP = "resource_group"
    COSMOS_DB_ACCOUNT = "cosmos_db_account"
    EVENT_HUBS_NAMESPACE = "event_hubs_namespace"
    EVENT_HUB = "event_hub"
    AUTHORIZATION_RULE = "authorization_rule"
    DIAGNOSTIC_SETTING = "diagnostic_setting"


class DescriptorState(Enum):
    """
    Per-descriptor progress through the executor.

    Planned -> Creating -> (Created | CreateFailed). No transition leads
    back to Planned and CreateFailed is terminal.
    """

    PLANNED = "planned"
    CREATING = "creating"
    CREATED = "created"
    CREATE_FAILED = "create_failed"


@dataclass
class RunConfig:
    """
    Parsed run configuration.

    Attributes:
        subscription_id: Azure subscription all resources are created in
        region: Region for the resource group, namespace and Cosmos DB account
        cosmos_locations: Cosmos DB geo-locations with failover priorities
        event_hub_name: Name of the event hub inside the namespace
        authorization_rule_name: Namespace rule the diagnostic setting sends with
        diagnostic_setting_name: Name of the diagnostic setting on the Cosmos DB account
        mode: "DEBUG" enables debug logging
        tenant_id/client_id/client_secret: Optional service principal
    """

    subscription_id: str
    region: str = CONSTANTS.DEFAULT_REGION
    cosmos_locations: list[dict] = field(
        default_factory=lambda: [dict(loc) for loc in CONSTANTS.DEFAULT_COSMOS_LOCATIONS]
    )
    event_hub_name: str = CONSTANTS.DEFAULT_EVENT_HUB_NAME
    authorization_rule_name: str = CONSTANTS.DEFAULT_AUTHORIZATION_RULE_NAME
    diagnostic_setting_name: str = CONSTANTS.DEFAULT_DIAGNOSTIC_SETTING_NAME
    resource_group_prefix: str = CONSTANTS.DEFAULT_RESOURCE_GROUP_PREFIX
    namespace_prefix: str = CONSTANTS.DEFAULT_NAMESPACE_PREFIX
    cosmos_account_prefix: str = CONSTANTS.DEFAULT_COSMOS_ACCOUNT_PREFIX
    mode: str = ""

    # Service principal (optional, DefaultAzureCredential otherwise)
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def debug_mode(self) -> bool:
        return self.mode.upper() == "DEBUG"

    def get_credentials(self) -> Dict[str, Any]:
        """
        Get the credentials dictionary consumed by AzureProvider.initialize_clients().

        Returns:
            Dict with azure_subscription_id and, when set, the
            service-principal fields.
        """
        credentials = {"azure_subscription_id": self.subscription_id}
        if self.tenant_id:
            credentials["azure_tenant_id"] = self.tenant_id
        if self.client_id:
            credentials["azure_client_id"] = self.client_id
        if self.client_secret:
            credentials["azure_client_secret"] = self.client_secret
        return credentials


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Declarative description of one resource to create.

    Immutable once planned: the config payload is exposed through a
    read-only mapping and depends_on is normalized to a tuple.

    Attributes:
        kind: What sort of resource this is
        name: Resource name, unique within a plan
        region: Azure region (empty for resources without a location)
        config: Creation payload handed to the provider
        depends_on: Names of descriptors that must be created first
    """

    kind: ResourceKind
    name: str
    region: str = ""
    config: Mapping[str, Any] = field(default_factory=dict, hash=False)
    depends_on: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "config", MappingProxyType(dict(self.config)))
        if isinstance(self.depends_on, str):
            object.__setattr__(self, "depends_on", (self.depends_on,))
        else:
            object.__setattr__(self, "depends_on", tuple(self.depends_on))

    def __str__(self) -> str:
        return f"{self.kind.value} '{self.name}'"


@dataclass(frozen=True)
class ProvisionedResource:
    """
    A resource the provider reported as created.

    Attributes:
        descriptor: The descriptor it was created from
        identifier: Remote (ARM) identifier
        created_at: When the create call reported success (UTC)
        ambiguous: True when the create was interrupted and the remote
            outcome is unknown; cleanup still attempts a deletion
    """

    descriptor: ResourceDescriptor
    identifier: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ambiguous: bool = False

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def kind(self) -> ResourceKind:
        return self.descriptor.kind


class ProvisioningLedger:
    """
    Ordered, append-only record of created resources.

    The ledger is the only source of truth for what has to be cleaned up.
    Entries are appended in creation order and handed out newest-first
    by drain_reversed(), which removes each entry as it yields it.
    """

    def __init__(self):
        self._entries: list[ProvisionedResource] = []

    def append(self, resource: ProvisionedResource) -> None:
        if self.get(resource.name) is not None:
            raise ValueError(f"Resource '{resource.name}' is already recorded in the ledger")
        self._entries.append(resource)

    def get(self, name: str) -> Optional[ProvisionedResource]:
        """Look up an entry by descriptor name."""
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    @property
    def entries(self) -> tuple[ProvisionedResource, ...]:
        return tuple(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def drain_reversed(self) -> Iterator[ProvisionedResource]:
        """Yield and remove entries, most recently created first."""
        while self._entries:
            yield self._entries.pop()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ProvisionedResource]:
        return iter(self.entries)
