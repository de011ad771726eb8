"""
Core abstractions for the diagnostics deployer.

This package provides the provider-independent provisioning pipeline:
planning, creation in dependency order, and guaranteed cleanup.

Modules:
    protocols: Interface definitions (ResourceProvider)
    context: RunConfig, descriptors, ledger
    config_loader: Configuration loading utilities
    planner: Builds and orders ResourceDescriptors
    executor: Creates descriptors and fills the ledger
    cleanup: Deletes ledger entries in reverse order
    pipeline: Provision-then-cleanup run
    exceptions: Custom exception types for deployment operations

Usage:
    from diagnostics_deployer.core import plan_resources, run_pipeline

    descriptors = plan_resources(config, naming)
    result = run_pipeline(provider, descriptors)
"""

from .protocols import ResourceProvider
from .context import (
    DescriptorState,
    ProvisionedResource,
    ProvisioningLedger,
    ResourceDescriptor,
    ResourceKind,
    RunConfig,
)
from .planner import order_descriptors, plan_resources
from .executor import ProvisioningExecutor
from .cleanup import CleanupCoordinator, CleanupReport
from .pipeline import PipelineResult, run_pipeline
from .exceptions import (
    CleanupFailed,
    DeploymentError,
    InvalidConfiguration,
    ProvisioningFailed,
    ResourceCreationError,
    ResourceDeletionError,
    ResourceOperationError,
)

__all__ = [
    # Protocols
    "ResourceProvider",
    # Context
    "DescriptorState",
    "ProvisionedResource",
    "ProvisioningLedger",
    "ResourceDescriptor",
    "ResourceKind",
    "RunConfig",
    # Pipeline
    "order_descriptors",
    "plan_resources",
    "ProvisioningExecutor",
    "CleanupCoordinator",
    "CleanupReport",
    "PipelineResult",
    "run_pipeline",
    # Exceptions
    "CleanupFailed",
    "DeploymentError",
    "InvalidConfiguration",
    "ProvisioningFailed",
    "ResourceCreationError",
    "ResourceDeletionError",
    "ResourceOperationError",
]
