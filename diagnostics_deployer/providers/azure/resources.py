"""
Azure resource management - create/destroy/check per resource type.

Each resource type the pipeline provisions has three functions here:

    create_*   -> create_or_update, block until the terminal state,
                  return the ARM resource id
    destroy_*  -> delete and block; a missing resource is not an error
    check_*    -> the SDK model, or None if the resource does not exist

Resources managed:
    - Resource Group           (ResourceManagementClient)
    - Cosmos DB Account        (CosmosDBManagementClient)
    - Event Hubs Namespace     (EventHubManagementClient)
    - Event Hub                (EventHubManagementClient)
    - Authorization Rule       (EventHubManagementClient)
    - Diagnostic Setting       (MonitorManagementClient)

Long-running operations (begin_*) hand back an LROPoller; poller.result()
returns the final model or raises the operation's error.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, TYPE_CHECKING
import logging

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

if TYPE_CHECKING:
    from diagnostics_deployer.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


@contextmanager
def _reporting_errors(action: str, label: str) -> Iterator[None]:
    """Log Azure SDK errors raised inside the block, then re-raise them."""
    try:
        yield
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED {action} {label}: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"HTTP {e.status_code} {action} {label}: {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error {action} {label}: {type(e).__name__}: {e}")
        raise


@contextmanager
def _tolerating_missing(label: str) -> Iterator[None]:
    """Treat ResourceNotFoundError during a delete as already deleted."""
    with _reporting_errors("deleting", label):
        try:
            yield
        except ResourceNotFoundError:
            logger.info(f"{label} already deleted")


def _lookup(label: str, get_call) -> Optional[Any]:
    try:
        model = get_call()
    except ResourceNotFoundError:
        logger.info(f"✗ {label} not found")
        return None
    logger.info(f"✓ {label} exists")
    return model


# ==========================================
# Resource Group
# ==========================================

def create_resource_group(provider: 'AzureProvider', rg_name: str, location: str) -> str:
    """
    Create (or update) the Resource Group.

    The management API completes this call synchronously.

    Args:
        provider: AzureProvider with initialized clients
        rg_name: Resource Group name
        location: Azure region

    Returns:
        The Resource Group id
    """
    label = f"Resource Group '{rg_name}'"
    logger.info(f"Creating {label} in {location}")

    with _reporting_errors("creating", label):
        resource_group = provider.clients["resource"].resource_groups.create_or_update(
            resource_group_name=rg_name,
            parameters={"location": location}
        )
    logger.info(f"✓ Created {label}")
    return resource_group.id


def destroy_resource_group(provider: 'AzureProvider', rg_name: str) -> None:
    """Delete the Resource Group, including anything still inside it."""
    label = f"Resource Group '{rg_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["resource"].resource_groups.begin_delete(rg_name).result()
        logger.info(f"✓ Deleted {label}")


def check_resource_group(provider: 'AzureProvider', rg_name: str) -> Optional[Any]:
    return _lookup(
        f"Resource Group '{rg_name}'",
        lambda: provider.clients["resource"].resource_groups.get(rg_name)
    )


# ==========================================
# Cosmos DB Account
# ==========================================

def create_cosmos_account(
    provider: 'AzureProvider',
    rg_name: str,
    account_name: str,
    location: str,
    payload: Mapping[str, Any]
) -> str:
    """
    Create a Cosmos DB account and wait for provisioning to finish.

    Account creation is slow (several minutes); the call blocks until the
    poller reports the final state.

    Args:
        provider: AzureProvider with initialized clients
        rg_name: Resource Group the account lives in
        account_name: Globally unique account name
        location: Region of the account resource itself
        payload: kind, consistency_policy and geo-replicated locations

    Returns:
        The Cosmos DB account id
    """
    label = f"Cosmos DB account '{account_name}'"
    logger.info(f"Creating {label}")

    with _reporting_errors("creating", label):
        poller = provider.clients["cosmos"].database_accounts.begin_create_or_update(
            resource_group_name=rg_name,
            account_name=account_name,
            create_update_parameters={"location": location, **payload}
        )
        account = poller.result()
    logger.info(f"✓ Created {label}")
    return account.id


def destroy_cosmos_account(provider: 'AzureProvider', rg_name: str, account_name: str) -> None:
    label = f"Cosmos DB account '{account_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["cosmos"].database_accounts.begin_delete(
            resource_group_name=rg_name,
            account_name=account_name
        ).result()
        logger.info(f"✓ Deleted {label}")


def check_cosmos_account(provider: 'AzureProvider', rg_name: str, account_name: str) -> Optional[Any]:
    return _lookup(
        f"Cosmos DB account '{account_name}'",
        lambda: provider.clients["cosmos"].database_accounts.get(
            resource_group_name=rg_name,
            account_name=account_name
        )
    )


# ==========================================
# Event Hubs Namespace
# ==========================================

def create_event_hubs_namespace(
    provider: 'AzureProvider',
    rg_name: str,
    namespace_name: str,
    location: str,
    payload: Mapping[str, Any]
) -> str:
    """
    Create an Event Hubs namespace.

    Args:
        provider: AzureProvider with initialized clients
        rg_name: Resource Group the namespace lives in
        namespace_name: Globally unique namespace name
        location: Azure region
        payload: Namespace properties (sku)

    Returns:
        The namespace id
    """
    label = f"Event Hubs namespace '{namespace_name}'"
    logger.info(f"Creating {label}")

    with _reporting_errors("creating", label):
        poller = provider.clients["eventhub"].namespaces.begin_create_or_update(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            parameters={"location": location, **payload}
        )
        namespace = poller.result()
    logger.info(f"✓ Created {label}")
    return namespace.id


def destroy_event_hubs_namespace(provider: 'AzureProvider', rg_name: str, namespace_name: str) -> None:
    """Delete the namespace; its event hubs and rules go with it."""
    label = f"Event Hubs namespace '{namespace_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["eventhub"].namespaces.begin_delete(
            resource_group_name=rg_name,
            namespace_name=namespace_name
        ).result()
        logger.info(f"✓ Deleted {label}")


def check_event_hubs_namespace(provider: 'AzureProvider', rg_name: str, namespace_name: str) -> Optional[Any]:
    return _lookup(
        f"Event Hubs namespace '{namespace_name}'",
        lambda: provider.clients["eventhub"].namespaces.get(
            resource_group_name=rg_name,
            namespace_name=namespace_name
        )
    )


# ==========================================
# Event Hub
# ==========================================

def create_event_hub(
    provider: 'AzureProvider',
    rg_name: str,
    namespace_name: str,
    event_hub_name: str,
    payload: Mapping[str, Any]
) -> str:
    """Create an event hub in a namespace (synchronous API) and return its id."""
    label = f"Event Hub '{event_hub_name}'"
    logger.info(f"Creating {label} in {namespace_name}")

    with _reporting_errors("creating", label):
        event_hub = provider.clients["eventhub"].event_hubs.create_or_update(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            event_hub_name=event_hub_name,
            parameters=dict(payload)
        )
    logger.info(f"✓ Created {label}")
    return event_hub.id


def destroy_event_hub(provider: 'AzureProvider', rg_name: str, namespace_name: str, event_hub_name: str) -> None:
    label = f"Event Hub '{event_hub_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["eventhub"].event_hubs.delete(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            event_hub_name=event_hub_name
        )
        logger.info(f"✓ Deleted {label}")


def check_event_hub(
    provider: 'AzureProvider',
    rg_name: str,
    namespace_name: str,
    event_hub_name: str
) -> Optional[Any]:
    return _lookup(
        f"Event Hub '{event_hub_name}'",
        lambda: provider.clients["eventhub"].event_hubs.get(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            event_hub_name=event_hub_name
        )
    )


# ==========================================
# Namespace Authorization Rule
# ==========================================

def create_authorization_rule(
    provider: 'AzureProvider',
    rg_name: str,
    namespace_name: str,
    rule_name: str,
    rights: list[str]
) -> str:
    """
    Create a namespace-level shared access rule.

    The diagnostic setting publishes to the event hub with this rule, so
    it carries Listen, Send and Manage.

    Returns:
        The authorization rule id
    """
    label = f"authorization rule '{rule_name}'"
    logger.info(f"Creating {label} on {namespace_name}")

    with _reporting_errors("creating", label):
        rule = provider.clients["eventhub"].namespaces.create_or_update_authorization_rule(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            authorization_rule_name=rule_name,
            parameters={"rights": list(rights)}
        )
    logger.info(f"✓ Created {label}")
    return rule.id


def destroy_authorization_rule(provider: 'AzureProvider', rg_name: str, namespace_name: str, rule_name: str) -> None:
    label = f"authorization rule '{rule_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["eventhub"].namespaces.delete_authorization_rule(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            authorization_rule_name=rule_name
        )
        logger.info(f"✓ Deleted {label}")


def check_authorization_rule(
    provider: 'AzureProvider',
    rg_name: str,
    namespace_name: str,
    rule_name: str
) -> Optional[Any]:
    return _lookup(
        f"authorization rule '{rule_name}'",
        lambda: provider.clients["eventhub"].namespaces.get_authorization_rule(
            resource_group_name=rg_name,
            namespace_name=namespace_name,
            authorization_rule_name=rule_name
        )
    )


# ==========================================
# Diagnostic Setting
# ==========================================

def create_diagnostic_setting(
    provider: 'AzureProvider',
    resource_uri: str,
    setting_name: str,
    authorization_rule_id: str,
    payload: Mapping[str, Any]
) -> str:
    """
    Stream a resource's logs and metrics to an event hub.

    Args:
        provider: AzureProvider with initialized clients
        resource_uri: Id of the monitored resource (the Cosmos DB account)
        setting_name: Diagnostic setting name
        authorization_rule_id: Namespace rule used to publish to the event hub
        payload: event_hub_name plus the metrics and logs categories

    Returns:
        The diagnostic setting id
    """
    label = f"diagnostic setting '{setting_name}'"
    logger.info(f"Creating {label} on {resource_uri}")

    with _reporting_errors("creating", label):
        setting = provider.clients["monitor"].diagnostic_settings.create_or_update(
            resource_uri=resource_uri,
            name=setting_name,
            parameters={**payload, "event_hub_authorization_rule_id": authorization_rule_id}
        )
    logger.info(f"✓ Streaming of diagnostics events to event hub '{payload.get('event_hub_name')}' is enabled")
    return setting.id


def destroy_diagnostic_setting(provider: 'AzureProvider', resource_uri: str, setting_name: str) -> None:
    label = f"diagnostic setting '{setting_name}'"
    logger.info(f"Deleting {label}")

    with _tolerating_missing(label):
        provider.clients["monitor"].diagnostic_settings.delete(
            resource_uri=resource_uri,
            name=setting_name
        )
        logger.info(f"✓ Deleted {label}")


def check_diagnostic_setting(provider: 'AzureProvider', resource_uri: str, setting_name: str) -> Optional[Any]:
    return _lookup(
        f"diagnostic setting '{setting_name}'",
        lambda: provider.clients["monitor"].diagnostic_settings.get(
            resource_uri=resource_uri,
            name=setting_name
        )
    )
