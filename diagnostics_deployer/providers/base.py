"""
Shared base class for provider implementations.

Contents:
    - BaseProvider: client storage, initialization guard and
      dependency lookup shared by ResourceProvider implementations
"""

from typing import Any, Dict, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from diagnostics_deployer.core.context import (
        ProvisionedResource,
        ResourceDescriptor,
        ResourceKind,
    )


class BaseProvider:
    """
    Optional base class for ResourceProvider implementations.

    Providers are only required to implement the ResourceProvider
    protocol; inheriting from this class gives them the initialization
    guard and the dependency helpers.
    """

    name: str = "base"

    def __init__(self):
        self._clients: Dict[str, Any] = {}
        self._initialized: bool = False

    @property
    def clients(self) -> Dict[str, Any]:
        """SDK clients keyed by service; available after initialize_clients()."""
        if not self._initialized:
            raise RuntimeError(
                f"{self.name} provider has no clients yet; call initialize_clients() first"
            )
        return self._clients

    @staticmethod
    def find_dependency(
        descriptor: 'ResourceDescriptor',
        dependencies: Mapping[str, 'ProvisionedResource'],
        kind: 'ResourceKind',
        required: bool = True
    ) -> 'ProvisionedResource':
        """
        Find the dependency of a given kind.

        Args:
            descriptor: The descriptor being created
            dependencies: Ledger entries for descriptor.depends_on
            kind: The kind of dependency wanted
            required: Raise when missing (otherwise return None)

        Raises:
            ValueError: If a required dependency of that kind is missing
        """
        for name in descriptor.depends_on:
            entry = dependencies.get(name)
            if entry is not None and entry.kind is kind:
                return entry
        if required:
            raise ValueError(
                f"{descriptor} requires a {kind.value} dependency, "
                f"got {list(descriptor.depends_on)}"
            )
        return None
