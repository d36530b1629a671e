"""Constants and default values for azrg-inventory.

This module centralizes the Azure Management API endpoints, retry and
concurrency defaults, regional limits and output column layouts used
throughout the application.
"""

from azrg_inventory.core.config import (
    LogConfig,
    RetryConfig,
    StorageLimitConfig,
    WorkerConfig,
)

# ==================== AZURE MANAGEMENT API ====================

MANAGEMENT_API_BASE = "https://management.azure.com"
MANAGEMENT_SCOPE = f"{MANAGEMENT_API_BASE}/.default"

RESOURCE_GROUPS_API_VERSION = "2021-04-01"
RESOURCES_API_VERSION = "2019-10-01"
STORAGE_ACCOUNTS_API_VERSION = "2021-09-01"

RESOURCE_GROUPS_URL = (
    MANAGEMENT_API_BASE
    + "/subscriptions/{subscription_id}/resourcegroups?api-version="
    + RESOURCE_GROUPS_API_VERSION
)
RESOURCES_IN_GROUP_URL = (
    MANAGEMENT_API_BASE
    + "/subscriptions/{subscription_id}/resourceGroups/{resource_group}/resources"
    + "?$expand=createdTime&api-version="
    + RESOURCES_API_VERSION
)
STORAGE_ACCOUNTS_URL = (
    MANAGEMENT_API_BASE
    + "/subscriptions/{subscription_id}/providers/Microsoft.Storage/storageAccounts"
    + "?$expand=createdTime&api-version="
    + STORAGE_ACCOUNTS_API_VERSION
)

# ==================== HTTP DEFAULTS ====================

HTTP_TIMEOUT_SECONDS = 30
HTTP_POOL_CONNECTIONS = 100
HTTP_POOL_MAXSIZE_PER_HOST = 10
HTTP_STATUS_OK = 200
HTTP_STATUS_TOO_MANY_REQUESTS = 429

# Maximum characters of a response body kept in error messages
ERROR_BODY_PREVIEW_CHARS = 500

# ==================== DEFAULT CONFIGURATIONS ====================

DEFAULT_RETRY = RetryConfig()
DEFAULT_WORKERS = WorkerConfig()
DEFAULT_LIMITS = StorageLimitConfig()
DEFAULT_LOG = LogConfig()

DEFAULT_MAX_CONCURRENCY = DEFAULT_WORKERS.max_concurrency

# Upper bound on scheduler threads; the admission gate sets real parallelism
MAX_SCHEDULER_THREADS = 256

# ==================== COMMANDS ====================

COMMAND_RESOURCE_GROUPS = "resource-groups"
COMMAND_STORAGE_ACCOUNTS = "storage-accounts"
COMMANDS = (COMMAND_RESOURCE_GROUPS, COMMAND_STORAGE_ACCOUNTS)

# ==================== STORAGE ACCOUNTS ====================

DEFAULT_ACCOUNT_TYPE = "Standard_LRS"
UNKNOWN_ACCOUNT_TYPE = "Unknown"
STANDARD_DNS_PREFIX = "Standard_"

# ==================== OUTPUT ====================

NOT_AVAILABLE = "Not available"
PORCELAIN_NOT_AVAILABLE = "N/A"
PORCELAIN_ERROR = "ERROR"
OLDEST_DATE_FORMAT = "%Y-%m-%d"
RESOURCE_LIST_SEPARATOR = "; "

RESOURCE_GROUP_CSV_COLUMNS = [
    "ResourceGroupName",
    "Location",
    "ProvisioningState",
    "CreatedTime",
    "IsDefault",
    "CreatedBy",
    "Description",
    "Resources",
]

STORAGE_ACCOUNT_CSV_COLUMNS = [
    "StorageAccountName",
    "Location",
    "AccountType",
    "ProvisioningState",
    "CreatedTime",
    "ResourceGroup",
    "BlobEndpoint",
    "QueueEndpoint",
    "TableEndpoint",
    "FileEndpoint",
    "Error",
]

RESOURCE_GROUP_PORCELAIN_HEADER = ["NAME", "LOCATION", "PROVISIONING_STATE", "CREATED_TIME", "IS_DEFAULT"]

# ==================== DISPLAY CONSTANTS ====================

# Width of banner separator lines (used across CLI output)
BANNER_WIDTH = 60

TQDM_BAR_FORMAT = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}]"

# ==================== LOGGING ====================

LOG_FILE_MAX_BYTES = DEFAULT_LOG.file_max_bytes
LOG_FILE_BACKUP_COUNT = DEFAULT_LOG.file_backup_count
LOG_FILE_PREFIX = "azrginventory"
