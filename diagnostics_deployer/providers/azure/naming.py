"""
Azure resource naming conventions.

This module generates random, collision-resistant names for the resources
the pipeline creates, following Azure naming restrictions.

Naming Convention:
    - Resource Group: {prefix}{digits}          e.g. rgEvHb48213907
    - Cosmos DB Account: {prefix}{digits}       e.g. docdb70416355 (lowercase)
    - Event Hubs Namespace: {prefix}{digits}    e.g. ns19920455 (lowercase)

    Restrictions:
    - Resource Groups: 1-90 chars, alphanumeric, underscores, hyphens, periods
    - Cosmos DB accounts: 3-44 chars, lowercase alphanumeric and hyphens
    - Event Hubs namespaces: 6-50 chars, start with a letter,
      alphanumeric and hyphens

Each name is generated once per AzureNaming instance and then returned
unchanged, so the planner and the provider always agree on it.

Usage:
    from diagnostics_deployer.providers.azure.naming import AzureNaming

    naming = AzureNaming()
    rg_name = naming.resource_group()  # "rgEvHb48213907"
"""

import random
import re
from typing import Optional, TYPE_CHECKING

from diagnostics_deployer import constants as CONSTANTS

if TYPE_CHECKING:
    from diagnostics_deployer.core.context import RunConfig


def create_random_name(
    prefix: str,
    max_length: int,
    rng: Optional[random.Random] = None,
    lowercase: bool = False
) -> str:
    """
    Create a random resource name from a prefix.

    Args:
        prefix: Leading part of the name
        max_length: Azure limit for the resource type
        rng: Random source (SystemRandom by default)
        lowercase: Lowercase and strip characters Azure rejects

    Returns:
        prefix followed by random digits, at most max_length chars
    """
    rng = rng or random.SystemRandom()
    if lowercase:
        prefix = re.sub(r'[^a-z0-9-]', '', prefix.lower())
    if not prefix or not prefix[0].isalpha():
        prefix = f"r{prefix}"

    digits = CONSTANTS.RANDOM_SUFFIX_DIGITS
    prefix = prefix[:max(max_length - digits, 1)]
    suffix = "".join(str(rng.randrange(10)) for _ in range(digits))
    return f"{prefix}{suffix}"[:max_length]


class AzureNaming:
    """
    Generates the names of one provisioning run.

    Attributes:
        resource_group_prefix: Prefix of the resource group name
        namespace_prefix: Prefix of the Event Hubs namespace name
        cosmos_account_prefix: Prefix of the Cosmos DB account name
    """

    def __init__(
        self,
        resource_group_prefix: str = CONSTANTS.DEFAULT_RESOURCE_GROUP_PREFIX,
        namespace_prefix: str = CONSTANTS.DEFAULT_NAMESPACE_PREFIX,
        cosmos_account_prefix: str = CONSTANTS.DEFAULT_COSMOS_ACCOUNT_PREFIX,
        rng: Optional[random.Random] = None
    ):
        self.resource_group_prefix = resource_group_prefix
        self.namespace_prefix = namespace_prefix
        self.cosmos_account_prefix = cosmos_account_prefix
        self._rng = rng or random.SystemRandom()
        self._names: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: 'RunConfig', rng: Optional[random.Random] = None) -> 'AzureNaming':
        """Build naming from the prefixes in a RunConfig."""
        return cls(
            resource_group_prefix=config.resource_group_prefix,
            namespace_prefix=config.namespace_prefix,
            cosmos_account_prefix=config.cosmos_account_prefix,
            rng=rng
        )

    def _name(self, key: str, prefix: str, max_length: int, lowercase: bool) -> str:
        if key not in self._names:
            self._names[key] = create_random_name(prefix, max_length, self._rng, lowercase)
        return self._names[key]

    def resource_group(self) -> str:
        """Resource Group holding every resource of the run."""
        return self._name(
            "resource_group", self.resource_group_prefix,
            CONSTANTS.RESOURCE_GROUP_NAME_MAX_LENGTH, lowercase=False
        )

    def cosmos_account(self) -> str:
        """
        Cosmos DB account name.

        Cosmos DB account names are global DNS names: lowercase, max 44 chars.
        """
        return self._name(
            "cosmos_account", self.cosmos_account_prefix,
            CONSTANTS.COSMOS_ACCOUNT_NAME_MAX_LENGTH, lowercase=True
        )

    def event_hubs_namespace(self) -> str:
        """Event Hubs namespace name (global DNS name, max 50 chars)."""
        return self._name(
            "event_hubs_namespace", self.namespace_prefix,
            CONSTANTS.EVENT_HUBS_NAMESPACE_NAME_MAX_LENGTH, lowercase=True
        )
