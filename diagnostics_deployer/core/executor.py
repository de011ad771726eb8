"""
Provisioning executor.

Creates planned resources one at a time, in order, and records every
successful create in the ProvisioningLedger.

Behaviour:
    - Each create blocks until the provider reports a terminal state
    - Fail-fast: the first failed create halts the run with
      ProvisioningFailed; the ledger keeps what was created before it
    - Interrupted creates (Ctrl+C, SystemExit) are recorded as ambiguous
      so cleanup still attempts their deletion, then the interrupt
      propagates
"""

import logging
from typing import Dict, Iterable, Optional, TYPE_CHECKING

from .context import (
    DescriptorState,
    ProvisionedResource,
    ProvisioningLedger,
    ResourceDescriptor,
)
from .exceptions import ProvisioningFailed

if TYPE_CHECKING:
    from .protocols import ResourceProvider

logger = logging.getLogger(__name__)


class ProvisioningExecutor:
    """
    Issues create requests in dependency order.

    Attributes:
        provider: The ResourceProvider collaborator
        ledger: Ledger that receives every created resource
        states: Current DescriptorState per descriptor name
    """

    def __init__(self, provider: 'ResourceProvider', ledger: Optional[ProvisioningLedger] = None):
        self.provider = provider
        self.ledger = ledger if ledger is not None else ProvisioningLedger()
        self.states: Dict[str, DescriptorState] = {}

    def _transition(self, descriptor: ResourceDescriptor, state: DescriptorState) -> None:
        self.states[descriptor.name] = state
        logger.debug(f"{descriptor}: {state.value}")

    def _dependencies(self, descriptor: ResourceDescriptor) -> Dict[str, ProvisionedResource]:
        dependencies = {}
        for name in descriptor.depends_on:
            entry = self.ledger.get(name)
            if entry is None:
                raise ValueError(
                    f"{descriptor} depends on '{name}', which has not been created"
                )
            dependencies[name] = entry
        return dependencies

    def _record_ambiguous(self, descriptor: ResourceDescriptor, dependencies: dict) -> None:
        """Record an interrupted create so cleanup still tries to delete it."""
        try:
            identifier = self.provider.resource_id(descriptor, dependencies)
        except Exception as e:
            logger.error(f"Could not determine identifier of interrupted {descriptor}: {e}")
            return
        self.ledger.append(ProvisionedResource(descriptor, identifier, ambiguous=True))
        logger.warning(f"Creation of {descriptor} was interrupted; assuming it may exist")

    def create(self, descriptor: ResourceDescriptor) -> ProvisionedResource:
        """
        Create a single descriptor.

        Args:
            descriptor: The descriptor to create; its dependencies must
                already be in the ledger

        Returns:
            The ProvisionedResource appended to the ledger

        Raises:
            ProvisioningFailed: If the provider reports a failure
            ValueError: If the descriptor was already executed or its name
                is already in the ledger (checked before any provider call)
        """
        if self.states.get(descriptor.name, DescriptorState.PLANNED) is not DescriptorState.PLANNED:
            raise ValueError(f"{descriptor} has already been executed")
        if self.ledger.get(descriptor.name) is not None:
            raise ValueError(f"{descriptor} is already recorded in the ledger")

        self._transition(descriptor, DescriptorState.CREATING)
        dependencies: Dict[str, ProvisionedResource] = {}
        try:
            dependencies = self._dependencies(descriptor)
            identifier = self.provider.create_or_update(descriptor, dependencies)
        except Exception as e:
            self._transition(descriptor, DescriptorState.CREATE_FAILED)
            logger.error(f"✗ Failed to create {descriptor}: {e}")
            raise ProvisioningFailed(descriptor, e, provider=self.provider.name) from e
        except BaseException:
            self._transition(descriptor, DescriptorState.CREATE_FAILED)
            self._record_ambiguous(descriptor, dependencies)
            raise

        resource = ProvisionedResource(descriptor, identifier)
        self.ledger.append(resource)
        self._transition(descriptor, DescriptorState.CREATED)
        return resource

    def run(self, descriptors: Iterable[ResourceDescriptor]) -> ProvisioningLedger:
        """
        Create every descriptor in order.

        Args:
            descriptors: Descriptors in creation order (see planner.order_descriptors)

        Returns:
            The ledger, holding one entry per descriptor

        Raises:
            ProvisioningFailed: On the first failed create
        """
        descriptors = list(descriptors)
        for descriptor in descriptors:
            self.states.setdefault(descriptor.name, DescriptorState.PLANNED)

        total = len(descriptors)
        for step, descriptor in enumerate(descriptors, start=1):
            logger.info(f"Step {step}/{total}: Creating {descriptor}...")
            resource = self.create(descriptor)
            logger.info(f"✓ Created {descriptor}: {resource.identifier}")

        return self.ledger
