# ==========================================
# 1. Configuration
# ==========================================
CONFIG_FILE = "config.json"

ENV_SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
ENV_TENANT_ID = "AZURE_TENANT_ID"
ENV_CLIENT_ID = "AZURE_CLIENT_ID"
ENV_CLIENT_SECRET = "AZURE_CLIENT_SECRET"
ENV_REGION = "AZURE_REGION"

# Keys accepted in config.json
CONFIG_KEYS = [
    "subscription_id",
    "region",
    "cosmos_locations",
    "event_hub_name",
    "authorization_rule_name",
    "diagnostic_setting_name",
    "resource_group_prefix",
    "namespace_prefix",
    "cosmos_account_prefix",
    "mode",
    "tenant_id",
    "client_id",
    "client_secret",
]

# ==========================================
# 2. Defaults
# ==========================================
DEFAULT_REGION = "eastus"

# Cosmos DB geo-replication: (location, failover priority)
DEFAULT_COSMOS_LOCATIONS = [
    {"location_name": "westus", "failover_priority": 0},
    {"location_name": "southcentralus", "failover_priority": 1},
]

DEFAULT_EVENT_HUB_NAME = "FirstEventHub"
DEFAULT_AUTHORIZATION_RULE_NAME = "DiagnosticsSendRule"
DEFAULT_DIAGNOSTIC_SETTING_NAME = "DiaEventHub"

# Built-in namespace rule, used when the plan does not create its own
ROOT_AUTHORIZATION_RULE_NAME = "RootManageSharedAccessKey"

DEFAULT_RESOURCE_GROUP_PREFIX = "rgEvHb"
DEFAULT_NAMESPACE_PREFIX = "ns"
DEFAULT_COSMOS_ACCOUNT_PREFIX = "docdb"

# ==========================================
# 3. Resource payloads
# ==========================================
COSMOS_KIND = "MongoDB"
COSMOS_CONSISTENCY_LEVEL = "Eventual"

AUTHORIZATION_RULE_RIGHTS = ["Listen", "Send", "Manage"]

DIAGNOSTIC_METRIC_CATEGORIES = ["AllMetrics"]
DIAGNOSTIC_LOG_CATEGORIES = ["DataPlaneRequests", "MongoRequests"]
# ISO 8601 duration, 5 minutes
DIAGNOSTIC_METRIC_TIME_GRAIN = "PT5M"

# ==========================================
# 4. Azure naming limits
# ==========================================
RESOURCE_GROUP_NAME_MAX_LENGTH = 90
COSMOS_ACCOUNT_NAME_MAX_LENGTH = 44
EVENT_HUBS_NAMESPACE_NAME_MAX_LENGTH = 50
RANDOM_SUFFIX_DIGITS = 8

# ==========================================
# 5. Process exit codes
# ==========================================
EXIT_SUCCESS = 0
EXIT_PROVISIONING_FAILED = 1
EXIT_INVALID_CONFIGURATION = 2
EXIT_INTERRUPTED = 130
