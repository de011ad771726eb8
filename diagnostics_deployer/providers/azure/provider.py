"""
Azure ResourceProvider implementation.

This module provides the Azure implementation of the ResourceProvider
protocol: SDK client initialization and per-kind dispatch of create,
delete and get calls to the functions in resources.py.

Management clients (provider.clients[key]):
    - resource: ResourceManagementClient (resource groups)
    - cosmos: CosmosDBManagementClient (database accounts)
    - eventhub: EventHubManagementClient (namespaces, event hubs, authorization rules)
    - monitor: MonitorManagementClient (diagnostic settings)

Addressing:
    Creation resolves parent names (resource group, namespace) from the
    ARM ids of the descriptor's dependencies. Deletion and lookup parse
    the ARM id recorded in the ledger, so cleanup never depends on
    anything but the ledger entry itself.

Usage:
    from diagnostics_deployer.providers.azure.provider import AzureProvider

    provider = AzureProvider()
    provider.initialize_clients(config.get_credentials())
"""

from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING
import logging

from azure.mgmt.core.tools import parse_resource_id, resource_id

from diagnostics_deployer import constants as CONSTANTS
from diagnostics_deployer.core.context import ResourceKind
from diagnostics_deployer.providers.base import BaseProvider
from diagnostics_deployer.providers.azure import resources

if TYPE_CHECKING:
    from diagnostics_deployer.core.context import ProvisionedResource, ResourceDescriptor

logger = logging.getLogger(__name__)

COSMOS_NAMESPACE = "Microsoft.DocumentDB"
EVENTHUB_NAMESPACE = "Microsoft.EventHub"
DIAGNOSTIC_SETTINGS_SEGMENT = "providers/Microsoft.Insights/diagnosticSettings"


def split_diagnostic_setting_id(identifier: str) -> tuple[str, str]:
    """
    Split a diagnostic setting id into (monitored resource uri, setting name).

    Diagnostic setting ids are the monitored resource's id followed by
    /providers/microsoft.insights/diagnosticSettings/{name}.
    """
    resource_uri, _, tail = identifier.rpartition("/providers/")
    if not resource_uri or "/" not in tail:
        raise ValueError(f"Not a diagnostic setting id: {identifier}")
    return resource_uri, tail.rsplit("/", 1)[1]


class AzureProvider(BaseProvider):
    """
    ResourceProvider backed by the Azure management SDKs.

    Attributes:
        name: "azure", used in logs and error messages
        subscription_id: Subscription every resource is created in
        clients: "resource", "cosmos", "eventhub" and "monitor" SDK clients
    """

    name: str = "azure"

    def __init__(self):
        super().__init__()
        self._subscription_id: str = ""

    @property
    def subscription_id(self) -> str:
        return self._subscription_id

    def initialize_clients(self, credentials: dict) -> None:
        """
        Authenticate and build the management clients.

        A service principal is used when azure_tenant_id, azure_client_id
        and azure_client_secret are all present; otherwise
        DefaultAzureCredential resolves the identity (CLI login, managed
        identity, environment).

        Args:
            credentials: Mapping from RunConfig.get_credentials()

        Raises:
            ValueError: If azure_subscription_id is missing or empty
        """
        subscription_id = credentials.get("azure_subscription_id")
        if not subscription_id:
            raise ValueError(
                "No azure_subscription_id in credentials. "
                f"Set {CONSTANTS.ENV_SUBSCRIPTION_ID} or 'subscription_id' in {CONSTANTS.CONFIG_FILE}."
            )
        self._subscription_id = subscription_id

        self._create_clients(self._credential_for(credentials))
        self._initialized = True
        logger.debug(f"Azure clients ready for subscription {subscription_id}")

    @staticmethod
    def _credential_for(credentials: dict) -> Any:
        from azure.identity import DefaultAzureCredential, ClientSecretCredential

        service_principal = {
            "tenant_id": credentials.get("azure_tenant_id"),
            "client_id": credentials.get("azure_client_id"),
            "client_secret": credentials.get("azure_client_secret"),
        }
        if all(service_principal.values()):
            logger.debug("Authenticating with service principal")
            return ClientSecretCredential(**service_principal)
        return DefaultAzureCredential()

    def _create_clients(self, credential: Any) -> None:
        from azure.mgmt.resource import ResourceManagementClient
        from azure.mgmt.cosmosdb import CosmosDBManagementClient
        from azure.mgmt.eventhub import EventHubManagementClient
        from azure.mgmt.monitor import MonitorManagementClient

        client_classes = {
            "resource": ResourceManagementClient,
            "cosmos": CosmosDBManagementClient,
            "eventhub": EventHubManagementClient,
            "monitor": MonitorManagementClient,
        }
        for key, client_class in client_classes.items():
            self._clients[key] = client_class(credential=credential, subscription_id=self._subscription_id)

    # ==========================================
    # Dependency resolution
    # ==========================================

    def _resource_group_of(self, descriptor: 'ResourceDescriptor', dependencies: Mapping) -> str:
        rg = self.find_dependency(descriptor, dependencies, ResourceKind.RESOURCE_GROUP)
        return parse_resource_id(rg.identifier)["resource_group"]

    def _namespace_of(self, descriptor: 'ResourceDescriptor', dependencies: Mapping) -> tuple[str, str]:
        """Return (resource group, namespace name) of the parent namespace."""
        namespace = self.find_dependency(descriptor, dependencies, ResourceKind.EVENT_HUBS_NAMESPACE)
        parts = parse_resource_id(namespace.identifier)
        return parts["resource_group"], parts["name"]

    def _authorization_rule_id(self, descriptor: 'ResourceDescriptor', dependencies: Mapping) -> str:
        """
        Id of the rule the diagnostic setting sends with.

        Falls back to the namespace's built-in RootManageSharedAccessKey
        when the plan does not create its own rule.
        """
        rule = self.find_dependency(
            descriptor, dependencies, ResourceKind.AUTHORIZATION_RULE, required=False
        )
        if rule is not None:
            return rule.identifier

        event_hub = self.find_dependency(descriptor, dependencies, ResourceKind.EVENT_HUB)
        parts = parse_resource_id(event_hub.identifier)
        return resource_id(
            subscription=parts["subscription"],
            resource_group=parts["resource_group"],
            namespace=EVENTHUB_NAMESPACE,
            type="namespaces",
            name=parts["name"],
            child_type_1="authorizationRules",
            child_name_1=CONSTANTS.ROOT_AUTHORIZATION_RULE_NAME
        )

    def _diagnostic_payload(self, descriptor: 'ResourceDescriptor', dependencies: Mapping) -> Dict[str, Any]:
        payload = dict(descriptor.config)
        if not payload.get("event_hub_name"):
            event_hub = self.find_dependency(descriptor, dependencies, ResourceKind.EVENT_HUB)
            payload["event_hub_name"] = event_hub.name
        return payload

    # ==========================================
    # ResourceProvider protocol
    # ==========================================

    def create_or_update(
        self,
        descriptor: 'ResourceDescriptor',
        dependencies: Mapping[str, 'ProvisionedResource']
    ) -> str:
        """
        Create the described resource and wait for the operation to finish.

        Returns:
            The ARM id of the created resource
        """
        kind = descriptor.kind

        if kind is ResourceKind.RESOURCE_GROUP:
            return resources.create_resource_group(self, descriptor.name, descriptor.region)

        if kind is ResourceKind.COSMOS_DB_ACCOUNT:
            return resources.create_cosmos_account(
                self,
                self._resource_group_of(descriptor, dependencies),
                descriptor.name,
                descriptor.region,
                descriptor.config
            )

        if kind is ResourceKind.EVENT_HUBS_NAMESPACE:
            return resources.create_event_hubs_namespace(
                self,
                self._resource_group_of(descriptor, dependencies),
                descriptor.name,
                descriptor.region,
                descriptor.config
            )

        if kind is ResourceKind.EVENT_HUB:
            rg_name, namespace_name = self._namespace_of(descriptor, dependencies)
            return resources.create_event_hub(
                self, rg_name, namespace_name, descriptor.name, descriptor.config
            )

        if kind is ResourceKind.AUTHORIZATION_RULE:
            rg_name, namespace_name = self._namespace_of(descriptor, dependencies)
            return resources.create_authorization_rule(
                self, rg_name, namespace_name, descriptor.name,
                descriptor.config.get("rights", CONSTANTS.AUTHORIZATION_RULE_RIGHTS)
            )

        if kind is ResourceKind.DIAGNOSTIC_SETTING:
            monitored = self.find_dependency(descriptor, dependencies, ResourceKind.COSMOS_DB_ACCOUNT)
            return resources.create_diagnostic_setting(
                self,
                monitored.identifier,
                descriptor.name,
                self._authorization_rule_id(descriptor, dependencies),
                self._diagnostic_payload(descriptor, dependencies)
            )

        raise ValueError(f"Unsupported resource kind: {kind}")

    def delete(self, resource: 'ProvisionedResource') -> None:
        """Delete a created resource; a missing resource is not an error."""
        kind = resource.kind

        if kind is ResourceKind.DIAGNOSTIC_SETTING:
            resource_uri, setting_name = split_diagnostic_setting_id(resource.identifier)
            resources.destroy_diagnostic_setting(self, resource_uri, setting_name)
            return

        parts = parse_resource_id(resource.identifier)
        rg_name = parts["resource_group"]

        if kind is ResourceKind.RESOURCE_GROUP:
            resources.destroy_resource_group(self, rg_name)
        elif kind is ResourceKind.COSMOS_DB_ACCOUNT:
            resources.destroy_cosmos_account(self, rg_name, parts["name"])
        elif kind is ResourceKind.EVENT_HUBS_NAMESPACE:
            resources.destroy_event_hubs_namespace(self, rg_name, parts["name"])
        elif kind is ResourceKind.EVENT_HUB:
            resources.destroy_event_hub(self, rg_name, parts["name"], parts["child_name_1"])
        elif kind is ResourceKind.AUTHORIZATION_RULE:
            resources.destroy_authorization_rule(self, rg_name, parts["name"], parts["child_name_1"])
        else:
            raise ValueError(f"Unsupported resource kind: {kind}")

    def get(self, resource: 'ProvisionedResource') -> Optional[Any]:
        """Return the remote resource model, or None if it does not exist."""
        kind = resource.kind

        if kind is ResourceKind.DIAGNOSTIC_SETTING:
            resource_uri, setting_name = split_diagnostic_setting_id(resource.identifier)
            return resources.check_diagnostic_setting(self, resource_uri, setting_name)

        parts = parse_resource_id(resource.identifier)
        rg_name = parts["resource_group"]

        if kind is ResourceKind.RESOURCE_GROUP:
            return resources.check_resource_group(self, rg_name)
        if kind is ResourceKind.COSMOS_DB_ACCOUNT:
            return resources.check_cosmos_account(self, rg_name, parts["name"])
        if kind is ResourceKind.EVENT_HUBS_NAMESPACE:
            return resources.check_event_hubs_namespace(self, rg_name, parts["name"])
        if kind is ResourceKind.EVENT_HUB:
            return resources.check_event_hub(self, rg_name, parts["name"], parts["child_name_1"])
        if kind is ResourceKind.AUTHORIZATION_RULE:
            return resources.check_authorization_rule(self, rg_name, parts["name"], parts["child_name_1"])
        raise ValueError(f"Unsupported resource kind: {kind}")

    def resource_id(
        self,
        descriptor: 'ResourceDescriptor',
        dependencies: Mapping[str, 'ProvisionedResource']
    ) -> str:
        """Return the ARM id the described resource has once created."""
        kind = descriptor.kind
        subscription = self._subscription_id

        if kind is ResourceKind.RESOURCE_GROUP:
            return resource_id(subscription=subscription, resource_group=descriptor.name)

        if kind is ResourceKind.COSMOS_DB_ACCOUNT:
            return resource_id(
                subscription=subscription,
                resource_group=self._resource_group_of(descriptor, dependencies),
                namespace=COSMOS_NAMESPACE,
                type="databaseAccounts",
                name=descriptor.name
            )

        if kind is ResourceKind.EVENT_HUBS_NAMESPACE:
            return resource_id(
                subscription=subscription,
                resource_group=self._resource_group_of(descriptor, dependencies),
                namespace=EVENTHUB_NAMESPACE,
                type="namespaces",
                name=descriptor.name
            )

        if kind in (ResourceKind.EVENT_HUB, ResourceKind.AUTHORIZATION_RULE):
            rg_name, namespace_name = self._namespace_of(descriptor, dependencies)
            child_type = "eventhubs" if kind is ResourceKind.EVENT_HUB else "authorizationRules"
            return resource_id(
                subscription=subscription,
                resource_group=rg_name,
                namespace=EVENTHUB_NAMESPACE,
                type="namespaces",
                name=namespace_name,
                child_type_1=child_type,
                child_name_1=descriptor.name
            )

        if kind is ResourceKind.DIAGNOSTIC_SETTING:
            monitored = self.find_dependency(descriptor, dependencies, ResourceKind.COSMOS_DB_ACCOUNT)
            return f"{monitored.identifier}/{DIAGNOSTIC_SETTINGS_SEGMENT}/{descriptor.name}"

        raise ValueError(f"Unsupported resource kind: {kind}")
