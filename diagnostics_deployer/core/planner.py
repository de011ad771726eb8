"""
Resource planner.

Builds the ordered list of ResourceDescriptors the executor creates.
Planning is pure: no I/O and no provider calls. The only non-determinism
is the random part of generated names, which comes from the naming
strategy.

Default Plan (creation order):
    1. Resource Group
    2. Cosmos DB Account          (in the resource group)
    3. Event Hubs Namespace       (in the resource group)
    4. Event Hub                  (in the namespace)
    5. Authorization Rule         (on the namespace)
    6. Diagnostic Setting         (Cosmos DB account -> event hub)
"""

import logging
from typing import Iterable, Protocol

from diagnostics_deployer import constants as CONSTANTS
from .context import ResourceDescriptor, ResourceKind, RunConfig
from .exceptions import InvalidConfiguration

logger = logging.getLogger(__name__)


class NamingStrategy(Protocol):
    """Source of collision-resistant names for the generated resources."""

    def resource_group(self) -> str: ...

    def cosmos_account(self) -> str: ...

    def event_hubs_namespace(self) -> str: ...


def _cosmos_payload(config: RunConfig) -> dict:
    return {
        "kind": CONSTANTS.COSMOS_KIND,
        "database_account_offer_type": "Standard",
        "locations": [
            {
                "location_name": loc["location_name"],
                "failover_priority": loc.get("failover_priority", index),
                "is_zone_redundant": loc.get("is_zone_redundant", False),
            }
            for index, loc in enumerate(config.cosmos_locations)
        ],
        "consistency_policy": {
            "default_consistency_level": CONSTANTS.COSMOS_CONSISTENCY_LEVEL,
        },
    }


def _diagnostic_payload(config: RunConfig) -> dict:
    retention = {"enabled": False, "days": 0}
    return {
        "event_hub_name": config.event_hub_name,
        "metrics": [
            {
                "category": category,
                "enabled": True,
                "time_grain": CONSTANTS.DIAGNOSTIC_METRIC_TIME_GRAIN,
                "retention_policy": dict(retention),
            }
            for category in CONSTANTS.DIAGNOSTIC_METRIC_CATEGORIES
        ],
        "logs": [
            {
                "category": category,
                "enabled": True,
                "retention_policy": dict(retention),
            }
            for category in CONSTANTS.DIAGNOSTIC_LOG_CATEGORIES
        ],
    }


def plan_resources(config: RunConfig, naming: NamingStrategy) -> list[ResourceDescriptor]:
    """
    Build the Event Hub diagnostics plan.

    Args:
        config: Run configuration (region, fixed names, Cosmos DB locations)
        naming: Naming strategy for the randomly named resources

    Returns:
        Descriptors in dependency order

    Raises:
        InvalidConfiguration: If the resulting plan is inconsistent
    """
    region = config.region
    rg_name = naming.resource_group()
    cosmos_name = naming.cosmos_account()
    namespace_name = naming.event_hubs_namespace()

    descriptors = [
        ResourceDescriptor(ResourceKind.RESOURCE_GROUP, rg_name, region),
        ResourceDescriptor(
            ResourceKind.COSMOS_DB_ACCOUNT, cosmos_name, region,
            config=_cosmos_payload(config),
            depends_on=(rg_name,)
        ),
        ResourceDescriptor(
            ResourceKind.EVENT_HUBS_NAMESPACE, namespace_name, region,
            config={"sku": {"name": "Standard", "tier": "Standard"}},
            depends_on=(rg_name,)
        ),
        ResourceDescriptor(
            ResourceKind.EVENT_HUB, config.event_hub_name,
            depends_on=(namespace_name,)
        ),
        ResourceDescriptor(
            ResourceKind.AUTHORIZATION_RULE, config.authorization_rule_name,
            config={"rights": list(CONSTANTS.AUTHORIZATION_RULE_RIGHTS)},
            depends_on=(namespace_name,)
        ),
        ResourceDescriptor(
            ResourceKind.DIAGNOSTIC_SETTING, config.diagnostic_setting_name,
            config=_diagnostic_payload(config),
            depends_on=(cosmos_name, config.event_hub_name, config.authorization_rule_name)
        ),
    ]

    ordered = order_descriptors(descriptors)
    logger.debug(f"Planned {len(ordered)} resources: {[str(d) for d in ordered]}")
    return ordered


def order_descriptors(descriptors: Iterable[ResourceDescriptor]) -> list[ResourceDescriptor]:
    """
    Order descriptors so each one comes after everything it depends on.

    The ordering is stable: among descriptors whose dependencies are all
    satisfied, declaration order wins.

    Args:
        descriptors: Descriptors in declaration order

    Returns:
        A new list in creation order

    Raises:
        InvalidConfiguration: On duplicate names, dependencies missing from
            the list, self-dependencies or dependency cycles
    """
    pending = list(descriptors)

    names = set()
    for descriptor in pending:
        if descriptor.name in names:
            raise InvalidConfiguration(f"Duplicate descriptor name '{descriptor.name}' in plan")
        names.add(descriptor.name)

    for descriptor in pending:
        for dependency in descriptor.depends_on:
            if dependency == descriptor.name:
                raise InvalidConfiguration(f"Descriptor '{descriptor.name}' depends on itself")
            if dependency not in names:
                raise InvalidConfiguration(
                    f"Descriptor '{descriptor.name}' depends on '{dependency}', "
                    f"which is not in the plan"
                )

    ordered: list[ResourceDescriptor] = []
    placed: set[str] = set()
    while pending:
        ready = next(
            (d for d in pending if all(dep in placed for dep in d.depends_on)),
            None
        )
        if ready is None:
            raise InvalidConfiguration(
                f"Dependency cycle between descriptors: {sorted(d.name for d in pending)}"
            )
        pending.remove(ready)
        ordered.append(ready)
        placed.add(ready.name)

    return ordered
