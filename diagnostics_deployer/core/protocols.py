"""
Protocol definitions for the provisioning pipeline.

The executor and the cleanup coordinator only talk to the cloud through
the ResourceProvider protocol. Authentication, transport and retry live
entirely inside the implementation (the Azure SDK, for AzureProvider).
"""

from typing import Any, Mapping, Optional, Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    # Avoid circular imports - only import for type hints
    from .context import ResourceDescriptor, ProvisionedResource


@runtime_checkable
class ResourceProvider(Protocol):
    """
    Protocol for the cloud resource-management collaborator.

    Every call blocks until the remote long-running operation has
    reached a terminal state.
    """

    @property
    def name(self) -> str:
        """Provider identifier used in logs and error messages."""
        ...

    def create_or_update(
        self,
        descriptor: 'ResourceDescriptor',
        dependencies: Mapping[str, 'ProvisionedResource']
    ) -> str:
        """
        Create (or update, idempotent by name) the described resource.

        Args:
            descriptor: What to create
            dependencies: Ledger entries for every name in descriptor.depends_on

        Returns:
            The remote identifier of the created resource

        Raises:
            Exception: Any failure; the operation's terminal state was "failed"
        """
        ...

    def delete(self, resource: 'ProvisionedResource') -> None:
        """
        Delete a created resource.

        Deleting a resource that no longer exists is a success, not an error.
        """
        ...

    def get(self, resource: 'ProvisionedResource') -> Optional[Any]:
        """Return the current remote state, or None if it does not exist."""
        ...

    def resource_id(
        self,
        descriptor: 'ResourceDescriptor',
        dependencies: Mapping[str, 'ProvisionedResource']
    ) -> str:
        """
        Return the identifier the resource will have once created.

        Used to record interrupted creates whose outcome is unknown.
        """
        ...
