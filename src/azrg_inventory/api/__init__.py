"""API module - Azure Management API access with rate-limit handling."""

from azrg_inventory.api.client import AzureManagementClient, build_session, create_client
from azrg_inventory.api.resilience import ErrorMessageHelper
from azrg_inventory.api.transport import RateLimitedTransport

__all__ = [
    "AzureManagementClient",
    "ErrorMessageHelper",
    "RateLimitedTransport",
    "build_session",
    "create_client",
]
