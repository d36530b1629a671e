"""Azure Management API client.

Implements the two listing calls (resource groups, storage accounts) and the
per-resource-group detail fetch on top of ``RateLimitedTransport``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

from azrg_inventory.api.resilience import ErrorMessageHelper
from azrg_inventory.api.transport import RateLimitedTransport
from azrg_inventory.core.config import RetryConfig
from azrg_inventory.core.constants import (
    HTTP_POOL_CONNECTIONS,
    HTTP_POOL_MAXSIZE_PER_HOST,
    RESOURCE_GROUPS_URL,
    RESOURCES_IN_GROUP_URL,
    STORAGE_ACCOUNTS_URL,
)
from azrg_inventory.core.exceptions import FETCH_TRANSPORT, FetchError, ParseError, TransportError
from azrg_inventory.core.version import __version__
from azrg_inventory.inventory.models import Resource, ResourceGroup, StorageAccount, earliest_created_time


def build_session(
    access_token: str,
    pool_connections: int = HTTP_POOL_CONNECTIONS,
    pool_maxsize: int = HTTP_POOL_MAXSIZE_PER_HOST,
) -> requests.Session:
    """Create a pooled session that sends the bearer token on every request."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_connections, pool_maxsize=pool_maxsize, max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "User-Agent": f"azrginventory/{__version__}",
        }
    )
    return session


def _decode_page(response: requests.Response, operation: str) -> tuple[list[Any], str | None]:
    """Decode one ARM list page into its ``value`` array and ``nextLink``."""
    try:
        payload = response.json()
    except (json.JSONDecodeError, ValueError) as e:
        raise ParseError(f"Failed to parse response for {operation}", details=str(e)) from e
    finally:
        response.close()
    if not isinstance(payload, dict):
        raise ParseError(f"Failed to parse response for {operation}", details="expected a JSON object")
    value = payload.get("value", [])
    if not isinstance(value, list):
        raise ParseError(f"Failed to parse response for {operation}", details="'value' is not a list")
    next_link = payload.get("nextLink") or None
    if next_link is not None and not isinstance(next_link, str):
        raise ParseError(f"Failed to parse response for {operation}", details="'nextLink' is not a string")
    return value, next_link


class AzureManagementClient:
    """Read-only client for one subscription.

    Args:
        subscription_id: Subscription to inventory
        transport: Rate-limited transport bound to an authenticated session
        logger: Logger instance
    """

    def __init__(self, subscription_id: str, transport: RateLimitedTransport, logger: logging.Logger | None = None):
        self.subscription_id = subscription_id
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)

    # ==================== URLS ====================

    def resource_groups_url(self) -> str:
        return RESOURCE_GROUPS_URL.format(subscription_id=quote(self.subscription_id, safe=""))

    def resources_url(self, resource_group_name: str) -> str:
        return RESOURCES_IN_GROUP_URL.format(
            subscription_id=quote(self.subscription_id, safe=""),
            resource_group=quote(resource_group_name, safe=""),
        )

    def storage_accounts_url(self) -> str:
        return STORAGE_ACCOUNTS_URL.format(subscription_id=quote(self.subscription_id, safe=""))

    # ==================== LISTING (fatal on failure) ====================

    def _fetch_pages(self, url: str, operation: str) -> list[Any]:
        """Collect ``value`` items across every page, following ``nextLink``."""
        items: list[Any] = []
        seen: set[str] = set()
        next_url: str | None = url
        while next_url is not None:
            if next_url in seen:
                raise ParseError(f"Failed to parse response for {operation}", details="'nextLink' repeats a page")
            seen.add(next_url)
            response = self.transport.fetch(next_url, operation_name=operation)
            page, next_url = _decode_page(response, operation)
            items.extend(page)
        if len(seen) > 1:
            self.logger.debug(f"Fetched {len(items)} {operation} across {len(seen)} pages")
        return items

    def _list(self, url: str, operation: str) -> list[Any]:
        try:
            return self._fetch_pages(url, operation)
        except FetchError as e:
            if e.kind == FETCH_TRANSPORT and e.original_error is not None:
                self.logger.error(ErrorMessageHelper.get_network_error_message(e.original_error, operation))
            elif e.status_code is not None:
                self.logger.error(ErrorMessageHelper.get_http_error_message(e.status_code, operation))
            raise TransportError(
                f"Failed to fetch {operation}",
                operation=operation,
                status_code=e.status_code if e.kind != FETCH_TRANSPORT else None,
                details=e.body or e.message,
                original_error=e,
            ) from e
        except ParseError as e:
            raise TransportError(
                f"Failed to fetch {operation}", operation=operation, details=str(e), original_error=e
            ) from e

    def list_resource_groups(self) -> list[ResourceGroup]:
        """List every resource group in the subscription."""
        items = self._list(self.resource_groups_url(), "resource groups")
        try:
            groups = [ResourceGroup.from_api(item) for item in items]
        except ParseError as e:
            raise TransportError("Failed to fetch resource groups", details=str(e), original_error=e) from e
        self.logger.debug(f"Listed {len(groups)} resource groups")
        return groups

    def list_storage_accounts(self) -> list[StorageAccount]:
        """List every storage account in the subscription.

        Creation timestamps are left unparsed; see ``StorageAccount.resolve_created_time``.
        """
        items = self._list(self.storage_accounts_url(), "storage accounts")
        try:
            accounts = [StorageAccount.from_api(item) for item in items]
        except ParseError as e:
            raise TransportError("Failed to fetch storage accounts", details=str(e), original_error=e) from e
        self.logger.debug(f"Listed {len(accounts)} storage accounts")
        return accounts

    # ==================== DETAIL (per entity) ====================

    def list_resources(self, resource_group: ResourceGroup | str) -> list[Resource]:
        """List the resources of one resource group with their creation times.

        Raises:
            FetchError: The request failed or was rate limited too often
            ParseError: The body was not the expected JSON
        """
        name = resource_group.name if isinstance(resource_group, ResourceGroup) else resource_group
        if not name:
            raise ParseError("Resource group has no name")
        operation = f"resources in {name}"
        return [Resource.from_api(item) for item in self._fetch_pages(self.resources_url(name), operation)]

    def fetch_created_time(self, resource_group: ResourceGroup | str) -> datetime | None:
        """Creation time of a resource group: the earliest creation time of its resources."""
        return earliest_created_time(self.list_resources(resource_group))

    def close(self) -> None:
        session = getattr(self.transport, "session", None)
        if session is not None:
            session.close()

    def __enter__(self) -> AzureManagementClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_client(
    subscription_id: str,
    access_token: str,
    retry_config: RetryConfig | None = None,
    max_concurrency: int = HTTP_POOL_MAXSIZE_PER_HOST,
    logger: logging.Logger | None = None,
    quiet_retries: bool = False,
) -> AzureManagementClient:
    """Build a client whose connection pool fits the concurrency budget."""
    session = build_session(access_token, pool_maxsize=max(HTTP_POOL_MAXSIZE_PER_HOST, max_concurrency))
    transport = RateLimitedTransport(session, retry_config=retry_config, logger=logger, quiet_retries=quiet_retries)
    return AzureManagementClient(subscription_id, transport, logger=logger)
