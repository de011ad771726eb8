"""
Cleanup coordinator.

Deletes everything recorded in a ProvisioningLedger, newest first.

Behaviour:
    - Empty ledger: nothing was created, succeed silently
    - Each deletion is independent; a failure is recorded and the next
      resource is still attempted
    - "Already gone" is handled by the provider as success
    - All failures are gathered into one CleanupReport
    - An interrupt (Ctrl+C, SystemExit) stops cleanup; the entry being
      deleted and everything older stay in the ledger, then the
      interrupt propagates
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .context import ProvisionedResource, ProvisioningLedger
from .exceptions import CleanupFailed, ResourceDeletionError

if TYPE_CHECKING:
    from .protocols import ResourceProvider

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    """
    Outcome of one cleanup pass.

    Attributes:
        deleted: Resources whose deletion reached a successful terminal state,
            in the order they were deleted
        failures: One ResourceDeletionError per resource that could not be deleted
    """

    deleted: list[ProvisionedResource] = field(default_factory=list)
    failures: list[ResourceDeletionError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def as_error(self) -> CleanupFailed:
        return CleanupFailed(self.failures)

    def raise_for_failures(self) -> None:
        """Raise CleanupFailed if any deletion failed."""
        if self.failures:
            raise self.as_error()


class CleanupCoordinator:
    """Best-effort, reverse-order deletion of ledger entries."""

    def __init__(self, provider: 'ResourceProvider'):
        self.provider = provider

    def _delete(self, resource: ProvisionedResource, report: CleanupReport) -> None:
        logger.info(f"Deleting {resource.descriptor}: {resource.identifier}")
        try:
            self.provider.delete(resource)
        except Exception as e:
            logger.warning(f"✗ Could not delete {resource.descriptor}: {e}")
            report.failures.append(ResourceDeletionError(
                resource.kind.value,
                resource.name,
                identifier=resource.identifier,
                provider=self.provider.name,
                original_error=e
            ))
            return
        report.deleted.append(resource)
        logger.info(f"✓ Deleted {resource.descriptor}")

    def cleanup(self, ledger: ProvisioningLedger) -> CleanupReport:
        """
        Delete every ledger entry, most recently created first.

        The ledger is drained as it goes, so running cleanup again on the
        same ledger makes no further provider calls.

        Args:
            ledger: The ledger built by the executor

        Returns:
            CleanupReport listing deleted resources and failures
        """
        report = CleanupReport()

        if ledger.is_empty():
            logger.info("Did not create any resources in Azure. No clean up is necessary")
            return report

        logger.info(f"Cleaning up {len(ledger)} resource(s)...")
        for resource in ledger.drain_reversed():
            try:
                self._delete(resource, report)
            except BaseException:
                # the ledger keeps every entry not yet deleted
                ledger.append(resource)
                logger.warning(
                    f"Cleanup interrupted; {len(ledger)} resource(s) left undeleted: "
                    f"{[entry.name for entry in ledger]}"
                )
                raise

        if report.succeeded:
            logger.info(f"✓ Cleanup complete: {len(report.deleted)} resource(s) deleted")
        else:
            logger.warning(
                f"Cleanup finished with {len(report.failures)} failure(s): "
                f"{[f.resource_name for f in report.failures]}"
            )
        return report
