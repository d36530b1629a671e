"""
azrg-inventory - Azure resource group and storage account inventory

Fetches every resource group (or storage account) in a subscription,
resolves creation times with bounded concurrency and rate-limit aware
retries, flags system-generated default resource groups and reports
storage accounts approaching per-region limits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from azrg_inventory.core.version import __version__

__all__ = ["__version__", "main"]

if TYPE_CHECKING:
    from azrg_inventory.cli.main import main


def __getattr__(name: str) -> Any:
    if name == "main":
        from azrg_inventory.cli.main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
