"""Output module - Console, porcelain and CSV renderers."""

from azrg_inventory.output.console import ConsoleRenderer
from azrg_inventory.output.csv_writer import CsvRenderer, resource_group_frame, storage_account_frame
from azrg_inventory.output.porcelain import PorcelainRenderer
from azrg_inventory.output.registry import RENDERER_REGISTRY, get_renderers

__all__ = [
    "RENDERER_REGISTRY",
    "ConsoleRenderer",
    "CsvRenderer",
    "PorcelainRenderer",
    "get_renderers",
    "resource_group_frame",
    "storage_account_frame",
]
