"""
Errors raised by the provisioning pipeline.

Exception Hierarchy:
    DeploymentError (base)
    ├── InvalidConfiguration - Plan or run configuration rejected before any call
    ├── ResourceOperationError - A single create/delete went wrong
    │   ├── ResourceCreationError
    │   │   └── ProvisioningFailed - Creation halted at this descriptor
    │   └── ResourceDeletionError
    └── CleanupFailed - Aggregate of every ResourceDeletionError of one cleanup
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ResourceDescriptor


class DeploymentError(Exception):
    """
    Root of the deployer's errors.

    Attributes:
        message: Description without the provider suffix
        provider: Name of the provider involved, if any
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(f"{message} [provider={provider}]" if provider else message)


class InvalidConfiguration(DeploymentError):
    """
    The plan or the run configuration cannot be used.

    Raised while loading config or planning, so nothing has been created
    yet and there is nothing to clean up. Typical causes: a dependency on
    a name missing from the plan, duplicate names, a dependency cycle, an
    unreadable config file or a missing subscription id.

    Example:
        >>> order_descriptors([hub])
        InvalidConfiguration: Descriptor 'hub1' depends on 'ns1', which is not in the plan
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        super().__init__(f"{message} (file: {config_file})" if config_file else message)


class ResourceOperationError(DeploymentError):
    """
    One remote operation on one resource failed.

    Attributes:
        operation: "create" or "delete"
        resource_type: ResourceKind value, e.g. "event_hub"
        resource_name: Descriptor name
        identifier: Remote id the operation targeted (empty if unknown)
        original_error: Exception raised by the provider
    """

    operation = "process"

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        identifier: str = "",
        provider: Optional[str] = None,
        original_error: Optional[BaseException] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.identifier = identifier
        self.original_error = original_error

        text = f"Failed to {self.operation} {resource_type} '{resource_name}'"
        if original_error is not None:
            text = f"{text}: {original_error}"
        super().__init__(text, provider=provider)


class ResourceCreationError(ResourceOperationError):
    operation = "create"


class ResourceDeletionError(ResourceOperationError):
    operation = "delete"


class ProvisioningFailed(ResourceCreationError):
    """
    A create step failed and the run stopped there.

    Whatever was created before the failed descriptor stays in the ledger
    and is deleted by the cleanup that follows. If that cleanup fails too,
    its CleanupFailed is attached as ``cleanup_failure`` and shown after
    this error's own message.

    Attributes:
        failed_descriptor: Descriptor whose create failed
        cause: Exception raised by the provider
        cleanup_failure: CleanupFailed from the cleanup that followed, if any
    """

    def __init__(
        self,
        failed_descriptor: 'ResourceDescriptor',
        cause: BaseException,
        provider: Optional[str] = None
    ):
        self.failed_descriptor = failed_descriptor
        self.cause = cause
        self.cleanup_failure: Optional['CleanupFailed'] = None
        super().__init__(
            failed_descriptor.kind.value,
            failed_descriptor.name,
            provider=provider,
            original_error=cause
        )

    def attach_cleanup_failure(self, failure: 'CleanupFailed') -> None:
        self.cleanup_failure = failure

    def __str__(self) -> str:
        text = super().__str__()
        if self.cleanup_failure is not None:
            text += f"\n  during cleanup: {self.cleanup_failure}"
        return text


class CleanupFailed(DeploymentError):
    """
    One or more deletions of a cleanup pass failed.

    Attributes:
        failures: ResourceDeletionError per resource left behind, in
            the order deletion was attempted
    """

    def __init__(self, failures: list[ResourceDeletionError]):
        self.failures = list(failures)
        details = "; ".join(str(f) for f in self.failures)
        super().__init__(f"Cleanup failed for {len(self.failures)} resource(s): {details}")
