import pytest
from unittest.mock import MagicMock

from diagnostics_deployer.core.context import ResourceDescriptor, ResourceKind, RunConfig


class FakeProvider:
    """
    In-memory ResourceProvider that records every call.

    Args:
        fail_on: Descriptor names whose create fails
        interrupt_on: Descriptor names whose create is interrupted (KeyboardInterrupt)
        delete_fail_on: Resource names whose delete fails
        delete_interrupt_on: Resource names whose delete is interrupted
    """

    name = "fake"

    def __init__(self, fail_on=(), interrupt_on=(), delete_fail_on=(), delete_interrupt_on=()):
        self.fail_on = set(fail_on)
        self.interrupt_on = set(interrupt_on)
        self.delete_fail_on = set(delete_fail_on)
        self.delete_interrupt_on = set(delete_interrupt_on)
        self.calls = []
        self.existing = {}
        self.received_dependencies = {}

    def resource_id(self, descriptor, dependencies):
        return f"/fake/{descriptor.kind.value}/{descriptor.name}"

    def create_or_update(self, descriptor, dependencies):
        self.calls.append(("create", descriptor.name))
        self.received_dependencies[descriptor.name] = dict(dependencies)
        if descriptor.name in self.interrupt_on:
            raise KeyboardInterrupt()
        if descriptor.name in self.fail_on:
            raise RuntimeError(f"create of {descriptor.name} failed")
        identifier = self.resource_id(descriptor, dependencies)
        self.existing[identifier] = descriptor
        return identifier

    def delete(self, resource):
        self.calls.append(("delete", resource.name))
        if resource.name in self.delete_interrupt_on:
            raise KeyboardInterrupt()
        if resource.name in self.delete_fail_on:
            raise RuntimeError(f"delete of {resource.name} failed")
        # Deleting something that is already gone is a success
        self.existing.pop(resource.identifier, None)

    def get(self, resource):
        return self.existing.get(resource.identifier)

    @property
    def created(self):
        return [name for action, name in self.calls if action == "create"]

    @property
    def deleted(self):
        return [name for action, name in self.calls if action == "delete"]


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars(monkeypatch):
    """Remove Azure environment variables to prevent accidental cloud calls."""
    for name in ("AZURE_SUBSCRIPTION_ID", "AZURE_TENANT_ID", "AZURE_CLIENT_ID",
                 "AZURE_CLIENT_SECRET", "AZURE_REGION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_provider_factory():
    """Return the FakeProvider class so tests can configure failures."""
    return FakeProvider


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def scenario_plan():
    """
    rg1 <- db1, rg1 <- ns1 <- hub1, (db1, hub1) <- diag1
    """
    return [
        ResourceDescriptor(ResourceKind.RESOURCE_GROUP, "rg1", "eastus"),
        ResourceDescriptor(ResourceKind.COSMOS_DB_ACCOUNT, "db1", "eastus", depends_on=("rg1",)),
        ResourceDescriptor(ResourceKind.EVENT_HUBS_NAMESPACE, "ns1", "eastus", depends_on=("rg1",)),
        ResourceDescriptor(ResourceKind.EVENT_HUB, "hub1", depends_on=("ns1",)),
        ResourceDescriptor(ResourceKind.DIAGNOSTIC_SETTING, "diag1", depends_on=("db1", "hub1")),
    ]


@pytest.fixture
def run_config():
    return RunConfig(subscription_id="00000000-0000-0000-0000-000000000000", region="eastus")


@pytest.fixture
def mock_azure_provider():
    """Create a mock AzureProvider with all required clients."""
    provider = MagicMock()
    provider.name = "azure"
    provider.clients = {
        "resource": MagicMock(),
        "cosmos": MagicMock(),
        "eventhub": MagicMock(),
        "monitor": MagicMock(),
    }
    return provider
