"""
Provision-then-cleanup pipeline.

Runs the executor and guarantees the cleanup coordinator runs afterwards
on every exit path: normal return, ProvisioningFailed, or cancellation.

Outcome Policy:
    - Provisioning succeeded: cleanup failures are logged, the run succeeds
    - Provisioning failed: the ProvisioningFailed error is the reported
      outcome; cleanup failures are attached to it, never replacing it
    - Cancelled: cleanup runs, then the interrupt propagates
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from diagnostics_deployer import constants as CONSTANTS
from .cleanup import CleanupCoordinator, CleanupReport
from .context import ProvisionedResource, ProvisioningLedger, ResourceDescriptor
from .executor import ProvisioningExecutor
from .exceptions import ProvisioningFailed
from .planner import order_descriptors

if TYPE_CHECKING:
    from .protocols import ResourceProvider

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Outcome of one pipeline run.

    Attributes:
        created: Ledger contents as they were when cleanup started
        cleanup_report: What cleanup deleted and what it could not
        error: The provisioning failure, if any
    """

    created: tuple[ProvisionedResource, ...]
    cleanup_report: CleanupReport
    error: Optional[ProvisioningFailed] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.error is not None:
            return CONSTANTS.EXIT_PROVISIONING_FAILED
        return CONSTANTS.EXIT_SUCCESS

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def run_pipeline(
    provider: 'ResourceProvider',
    descriptors: Iterable[ResourceDescriptor],
    ledger: Optional[ProvisioningLedger] = None
) -> PipelineResult:
    """
    Provision every descriptor, then clean everything up.

    The descriptors are validated and put in dependency order first, so a
    malformed plan is rejected before the provider is called at all.

    Args:
        provider: The ResourceProvider collaborator
        descriptors: Descriptors to create
        ledger: Optional ledger to record into (a fresh one by default)

    Returns:
        PipelineResult describing provisioning and cleanup

    Raises:
        InvalidConfiguration: On duplicate names, missing dependencies or
            cycles; nothing has been created
        KeyboardInterrupt/SystemExit: After cleanup, if the run was cancelled
    """
    descriptors = order_descriptors(descriptors)
    ledger = ledger if ledger is not None else ProvisioningLedger()
    executor = ProvisioningExecutor(provider, ledger)
    error: Optional[ProvisioningFailed] = None
    created: tuple[ProvisionedResource, ...] = ()
    report = CleanupReport()

    try:
        executor.run(descriptors)
        logger.info(f"✓ Provisioned {len(ledger)} resource(s)")
    except ProvisioningFailed as e:
        error = e
        logger.error(f"Provisioning halted: {e}")
    finally:
        created = ledger.entries
        report = CleanupCoordinator(provider).cleanup(ledger)

    if not report.succeeded:
        if error is not None:
            error.attach_cleanup_failure(report.as_error())
        else:
            logger.warning(f"Provisioning succeeded but cleanup was incomplete: {report.as_error()}")

    return PipelineResult(created=created, cleanup_report=report, error=error)
