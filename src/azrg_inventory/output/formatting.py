"""Cell formatting shared by the console, porcelain and CSV renderers."""

from azrg_inventory.core.constants import NOT_AVAILABLE, RESOURCE_LIST_SEPARATOR
from azrg_inventory.inventory.aggregator import AggregateRow
from azrg_inventory.inventory.models import Resource, format_timestamp


def created_cell(row: AggregateRow, error_text: str, missing_text: str = NOT_AVAILABLE) -> str:
    """Creation time of a row, ``error_text`` for failures, ``missing_text`` when unknown.

    ``error_text`` may contain ``{error}`` to embed the failure reason.
    """
    if not row.ok:
        return error_text.format(error=row.result.error)
    created = row.created_time
    if created is None:
        return missing_text
    return format_timestamp(created)


def resource_line(resource: Resource) -> str:
    created = format_timestamp(resource.created_time) if resource.created_time else NOT_AVAILABLE
    return f"{resource.name} ({resource.type}) - Created: {created}"


def resources_cell(row: AggregateRow) -> str:
    """Resources of a group joined into one cell, empty when not listed."""
    resources = getattr(row.result.value, "resources", None) if row.ok else None
    if not resources:
        return ""
    return RESOURCE_LIST_SEPARATOR.join(resource_line(resource) for resource in resources)
