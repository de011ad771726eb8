"""
Azure resource function unit tests.

Tests for the create/destroy/check functions in
providers/azure/resources.py covering:
- Happy path: create returns the ARM id, waiting on pollers where the SDK returns one
- Error handling: SDK errors are logged and re-raised
- Missing resources: destroy treats them as deleted, check returns None

Test Classes:
    - TestResourceGroup
    - TestCosmosAccount
    - TestEventHubsNamespace
    - TestEventHub
    - TestAuthorizationRule
    - TestDiagnosticSetting
"""

import pytest
from unittest.mock import MagicMock

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

from diagnostics_deployer.providers.azure import resources

RG_ID = "/subscriptions/sub/resourceGroups/rg1"
COSMOS_ID = f"{RG_ID}/providers/Microsoft.DocumentDB/databaseAccounts/db1"
NAMESPACE_ID = f"{RG_ID}/providers/Microsoft.EventHub/namespaces/ns1"


def _poller(result_id):
    poller = MagicMock()
    poller.result.return_value.id = result_id
    return poller


# ==========================================
# TestResourceGroup
# ==========================================

class TestResourceGroup:
    """Tests for Resource Group create/destroy/check functions."""

    def test_create_returns_id(self, mock_azure_provider):
        """Should create the Resource Group in the given region."""
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        rg_client.create_or_update.return_value.id = RG_ID

        result = resources.create_resource_group(mock_azure_provider, "rg1", "eastus")

        assert result == RG_ID
        rg_client.create_or_update.assert_called_once_with(
            resource_group_name="rg1", parameters={"location": "eastus"}
        )

    def test_create_permission_denied_reraises(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        rg_client.create_or_update.side_effect = ClientAuthenticationError(message="denied")

        with pytest.raises(ClientAuthenticationError):
            resources.create_resource_group(mock_azure_provider, "rg1", "eastus")

    def test_destroy_waits_for_poller(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        poller = MagicMock()
        rg_client.begin_delete.return_value = poller

        resources.destroy_resource_group(mock_azure_provider, "rg1")

        rg_client.begin_delete.assert_called_once_with("rg1")
        poller.result.assert_called_once()

    def test_destroy_missing_is_success(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        rg_client.begin_delete.side_effect = ResourceNotFoundError("gone")

        resources.destroy_resource_group(mock_azure_provider, "rg1")

    def test_destroy_other_error_propagates(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        rg_client.begin_delete.return_value.result.side_effect = HttpResponseError(message="conflict")

        with pytest.raises(HttpResponseError):
            resources.destroy_resource_group(mock_azure_provider, "rg1")

    def test_check_missing_returns_none(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups
        rg_client.get.side_effect = ResourceNotFoundError("gone")

        assert resources.check_resource_group(mock_azure_provider, "rg1") is None

    def test_check_existing_returns_model(self, mock_azure_provider):
        rg_client = mock_azure_provider.clients["resource"].resource_groups

        assert resources.check_resource_group(mock_azure_provider, "rg1") is rg_client.get.return_value


# ==========================================
# TestCosmosAccount
# ==========================================

class TestCosmosAccount:
    """Tests for Cosmos DB account create/destroy/check functions."""

    def test_create_merges_location_and_payload(self, mock_azure_provider):
        accounts = mock_azure_provider.clients["cosmos"].database_accounts
        accounts.begin_create_or_update.return_value = _poller(COSMOS_ID)
        payload = {"kind": "MongoDB", "locations": [{"location_name": "westus"}]}

        result = resources.create_cosmos_account(mock_azure_provider, "rg1", "db1", "eastus", payload)

        assert result == COSMOS_ID
        accounts.begin_create_or_update.assert_called_once_with(
            resource_group_name="rg1",
            account_name="db1",
            create_update_parameters={"location": "eastus", **payload}
        )

    def test_create_failure_propagates(self, mock_azure_provider):
        accounts = mock_azure_provider.clients["cosmos"].database_accounts
        accounts.begin_create_or_update.return_value.result.side_effect = HttpResponseError(message="quota")

        with pytest.raises(HttpResponseError):
            resources.create_cosmos_account(mock_azure_provider, "rg1", "db1", "eastus", {})

    def test_destroy(self, mock_azure_provider):
        accounts = mock_azure_provider.clients["cosmos"].database_accounts

        resources.destroy_cosmos_account(mock_azure_provider, "rg1", "db1")

        accounts.begin_delete.assert_called_once_with(resource_group_name="rg1", account_name="db1")
        accounts.begin_delete.return_value.result.assert_called_once()

    def test_destroy_missing_is_success(self, mock_azure_provider):
        accounts = mock_azure_provider.clients["cosmos"].database_accounts
        accounts.begin_delete.side_effect = ResourceNotFoundError("gone")

        resources.destroy_cosmos_account(mock_azure_provider, "rg1", "db1")

    def test_check_missing_returns_none(self, mock_azure_provider):
        accounts = mock_azure_provider.clients["cosmos"].database_accounts
        accounts.get.side_effect = ResourceNotFoundError("gone")

        assert resources.check_cosmos_account(mock_azure_provider, "rg1", "db1") is None


# ==========================================
# TestEventHubsNamespace
# ==========================================

class TestEventHubsNamespace:
    """Tests for Event Hubs namespace create/destroy/check functions."""

    def test_create(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces
        namespaces.begin_create_or_update.return_value = _poller(NAMESPACE_ID)

        result = resources.create_event_hubs_namespace(
            mock_azure_provider, "rg1", "ns1", "eastus", {"sku": {"name": "Standard"}}
        )

        assert result == NAMESPACE_ID
        namespaces.begin_create_or_update.assert_called_once_with(
            resource_group_name="rg1",
            namespace_name="ns1",
            parameters={"location": "eastus", "sku": {"name": "Standard"}}
        )

    def test_destroy_missing_is_success(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces
        namespaces.begin_delete.side_effect = ResourceNotFoundError("gone")

        resources.destroy_event_hubs_namespace(mock_azure_provider, "rg1", "ns1")

    def test_check_existing(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces

        result = resources.check_event_hubs_namespace(mock_azure_provider, "rg1", "ns1")

        assert result is namespaces.get.return_value


# ==========================================
# TestEventHub
# ==========================================

class TestEventHub:
    """Tests for event hub create/destroy/check functions."""

    def test_create(self, mock_azure_provider):
        event_hubs = mock_azure_provider.clients["eventhub"].event_hubs
        event_hubs.create_or_update.return_value.id = f"{NAMESPACE_ID}/eventhubs/hub1"

        result = resources.create_event_hub(mock_azure_provider, "rg1", "ns1", "hub1", {})

        assert result == f"{NAMESPACE_ID}/eventhubs/hub1"
        event_hubs.create_or_update.assert_called_once_with(
            resource_group_name="rg1",
            namespace_name="ns1",
            event_hub_name="hub1",
            parameters={}
        )

    def test_create_failure_propagates(self, mock_azure_provider):
        event_hubs = mock_azure_provider.clients["eventhub"].event_hubs
        event_hubs.create_or_update.side_effect = HttpResponseError(message="bad request")

        with pytest.raises(HttpResponseError):
            resources.create_event_hub(mock_azure_provider, "rg1", "ns1", "hub1", {})

    def test_destroy(self, mock_azure_provider):
        event_hubs = mock_azure_provider.clients["eventhub"].event_hubs

        resources.destroy_event_hub(mock_azure_provider, "rg1", "ns1", "hub1")

        event_hubs.delete.assert_called_once_with(
            resource_group_name="rg1", namespace_name="ns1", event_hub_name="hub1"
        )

    def test_check_missing_returns_none(self, mock_azure_provider):
        event_hubs = mock_azure_provider.clients["eventhub"].event_hubs
        event_hubs.get.side_effect = ResourceNotFoundError("gone")

        assert resources.check_event_hub(mock_azure_provider, "rg1", "ns1", "hub1") is None


# ==========================================
# TestAuthorizationRule
# ==========================================

class TestAuthorizationRule:
    """Tests for namespace authorization rule functions."""

    def test_create_with_rights(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces
        rule_id = f"{NAMESPACE_ID}/authorizationRules/rule1"
        namespaces.create_or_update_authorization_rule.return_value.id = rule_id

        result = resources.create_authorization_rule(
            mock_azure_provider, "rg1", "ns1", "rule1", ("Listen", "Send", "Manage")
        )

        assert result == rule_id
        namespaces.create_or_update_authorization_rule.assert_called_once_with(
            resource_group_name="rg1",
            namespace_name="ns1",
            authorization_rule_name="rule1",
            parameters={"rights": ["Listen", "Send", "Manage"]}
        )

    def test_destroy_missing_is_success(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces
        namespaces.delete_authorization_rule.side_effect = ResourceNotFoundError("gone")

        resources.destroy_authorization_rule(mock_azure_provider, "rg1", "ns1", "rule1")

    def test_check_missing_returns_none(self, mock_azure_provider):
        namespaces = mock_azure_provider.clients["eventhub"].namespaces
        namespaces.get_authorization_rule.side_effect = ResourceNotFoundError("gone")

        assert resources.check_authorization_rule(mock_azure_provider, "rg1", "ns1", "rule1") is None


# ==========================================
# TestDiagnosticSetting
# ==========================================

class TestDiagnosticSetting:
    """Tests for diagnostic setting functions."""

    def test_create_adds_authorization_rule(self, mock_azure_provider):
        settings = mock_azure_provider.clients["monitor"].diagnostic_settings
        setting_id = f"{COSMOS_ID}/providers/Microsoft.Insights/diagnosticSettings/diag1"
        settings.create_or_update.return_value.id = setting_id
        payload = {"event_hub_name": "hub1", "metrics": [], "logs": []}

        result = resources.create_diagnostic_setting(
            mock_azure_provider, COSMOS_ID, "diag1", f"{NAMESPACE_ID}/authorizationRules/rule1", payload
        )

        assert result == setting_id
        settings.create_or_update.assert_called_once_with(
            resource_uri=COSMOS_ID,
            name="diag1",
            parameters={
                "event_hub_name": "hub1",
                "metrics": [],
                "logs": [],
                "event_hub_authorization_rule_id": f"{NAMESPACE_ID}/authorizationRules/rule1",
            }
        )

    def test_create_failure_propagates(self, mock_azure_provider):
        settings = mock_azure_provider.clients["monitor"].diagnostic_settings
        settings.create_or_update.side_effect = HttpResponseError(message="bad category")

        with pytest.raises(HttpResponseError):
            resources.create_diagnostic_setting(mock_azure_provider, COSMOS_ID, "diag1", "rule", {})

    def test_destroy(self, mock_azure_provider):
        settings = mock_azure_provider.clients["monitor"].diagnostic_settings

        resources.destroy_diagnostic_setting(mock_azure_provider, COSMOS_ID, "diag1")

        settings.delete.assert_called_once_with(resource_uri=COSMOS_ID, name="diag1")

    def test_destroy_missing_is_success(self, mock_azure_provider):
        settings = mock_azure_provider.clients["monitor"].diagnostic_settings
        settings.delete.side_effect = ResourceNotFoundError("gone")

        resources.destroy_diagnostic_setting(mock_azure_provider, COSMOS_ID, "diag1")

    def test_check_missing_returns_none(self, mock_azure_provider):
        settings = mock_azure_provider.clients["monitor"].diagnostic_settings
        settings.get.side_effect = ResourceNotFoundError("gone")

        assert resources.check_diagnostic_setting(mock_azure_provider, COSMOS_ID, "diag1") is None
