"""Data models for Azure entities returned by the Management API.

Entities are frozen dataclasses built once from the listing payload and
never mutated afterwards, so worker threads can read them without locking.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from azrg_inventory.core.constants import DEFAULT_ACCOUNT_TYPE, STANDARD_DNS_PREFIX, UNKNOWN_ACCOUNT_TYPE
from azrg_inventory.core.exceptions import ParseError

# Azure emits up to 7 fractional digits; datetime keeps at most 6
_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp from the API into an aware datetime.

    Returns None for missing or empty values. Raises ParseError for
    anything that is present but not a timestamp.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ParseError("Invalid timestamp", details=repr(value))
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Normalize fractional seconds to microseconds
    text = _FRACTION_PATTERN.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ParseError("Invalid timestamp", details=value) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a datetime as RFC 3339 without fractional seconds."""
    text = value.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _require_mapping(payload: Any, kind: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ParseError(f"Malformed {kind} entry", details=f"expected object, got {type(payload).__name__}")
    return payload


def _optional_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"Field '{key}' must be a string", details=repr(value))
    return value


def extract_resource_group_from_id(resource_id: str) -> str:
    """Return the segment following ``resourceGroups`` in an ARM resource ID."""
    parts = resource_id.split("/")
    for i, part in enumerate(parts):
        if part == "resourceGroups" and i + 1 < len(parts):
            return parts[i + 1]
    return ""


@dataclass(frozen=True)
class ClassificationInfo:
    """Result of classifying an entity name.

    Attributes:
        is_default: Name matches a known system-generated resource group
        created_by: Service or tool that creates such groups
        description: Why the group exists
    """

    is_default: bool = False
    created_by: str = ""
    description: str = ""


@dataclass(frozen=True)
class ResourceGroup:
    id: str
    name: str
    location: str
    provisioning_state: str = ""

    @classmethod
    def from_api(cls, payload: Any) -> ResourceGroup:
        data = _require_mapping(payload, "resource group")
        properties = data.get("properties") or {}
        return cls(
            id=_optional_str(data, "id"),
            name=_optional_str(data, "name"),
            location=_optional_str(data, "location"),
            provisioning_state=_optional_str(_require_mapping(properties, "resource group properties"), "provisioningState"),
        )


@dataclass(frozen=True)
class Resource:
    id: str
    name: str
    type: str
    created_time: datetime | None = None

    @classmethod
    def from_api(cls, payload: Any) -> Resource:
        data = _require_mapping(payload, "resource")
        return cls(
            id=_optional_str(data, "id"),
            name=_optional_str(data, "name"),
            type=_optional_str(data, "type"),
            created_time=parse_timestamp(data.get("createdTime")),
        )


def earliest_created_time(resources: Iterable[Resource]) -> datetime | None:
    """Earliest creation time among resources, or None when none is known."""
    times = [r.created_time for r in resources if r.created_time is not None]
    return min(times) if times else None


@dataclass(frozen=True)
class StorageAccount:
    """A storage account as returned by the storageAccounts listing.

    Timestamps are kept as received and parsed per account by
    ``resolve_created_time`` so that one bad value fails only that account.
    """

    id: str
    name: str
    location: str
    kind: str = ""
    provisioning_state: str = ""
    account_type: str = ""
    creation_time_raw: str = ""
    created_time_raw: str = ""
    blob_endpoint: str = ""
    queue_endpoint: str = ""
    table_endpoint: str = ""
    file_endpoint: str = ""
    tags: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_api(cls, payload: Any) -> StorageAccount:
        data = _require_mapping(payload, "storage account")
        properties = _require_mapping(data.get("properties") or {}, "storage account properties")
        endpoints = _require_mapping(properties.get("primaryEndpoints") or {}, "primaryEndpoints")

        account_type = _optional_str(properties, "accountType")
        if not account_type:
            # Newer API versions report the SKU instead of properties.accountType
            sku = data.get("sku") or {}
            if isinstance(sku, dict):
                account_type = _optional_str(sku, "name")

        return cls(
            id=_optional_str(data, "id"),
            name=_optional_str(data, "name"),
            location=_optional_str(data, "location"),
            kind=_optional_str(data, "kind"),
            provisioning_state=_optional_str(properties, "provisioningState"),
            account_type=account_type,
            creation_time_raw=_optional_str(properties, "creationTime"),
            created_time_raw=_optional_str(data, "createdTime"),
            blob_endpoint=_optional_str(endpoints, "blob"),
            queue_endpoint=_optional_str(endpoints, "queue"),
            table_endpoint=_optional_str(endpoints, "table"),
            file_endpoint=_optional_str(endpoints, "file"),
            tags=dict(data["tags"]) if isinstance(data.get("tags"), dict) else {},
        )

    def resolve_created_time(self) -> datetime | None:
        """Creation time from ``properties.creationTime``, else the top-level ``createdTime``."""
        created = parse_timestamp(self.creation_time_raw)
        if created is None:
            created = parse_timestamp(self.created_time_raw)
        return created

    @property
    def resource_group(self) -> str:
        return extract_resource_group_from_id(self.id)

    @property
    def account_type_inferred(self) -> bool:
        """True when the API reported no usable account type."""
        return not self.account_type or self.account_type == UNKNOWN_ACCOUNT_TYPE

    @property
    def effective_account_type(self) -> str:
        return DEFAULT_ACCOUNT_TYPE if self.account_type_inferred else self.account_type

    @property
    def is_standard_dns(self) -> bool:
        """Accounts on Standard DNS endpoints count against the per-region DNS limit."""
        return self.effective_account_type.startswith(STANDARD_DNS_PREFIX)


@dataclass(frozen=True)
class ResourceGroupDetail:
    """Detail fetched for one resource group.

    ``resources`` is only populated when resources were requested.
    """

    created_time: datetime | None
    resources: tuple[Resource, ...] | None = None
