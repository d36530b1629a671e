"""Recognition of system-generated Azure resource groups by name."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from azrg_inventory.inventory.models import ClassificationInfo

UNCLASSIFIED = ClassificationInfo()


@dataclass(frozen=True)
class DefaultGroupPattern:
    """One row of the classification table."""

    matcher: Callable[[str], bool]
    created_by: str
    description: str

    @classmethod
    def regex(cls, pattern: str, created_by: str, description: str) -> DefaultGroupPattern:
        return cls(re.compile(pattern).search, created_by, description)


# Order matters: the first matching row wins.
DEFAULT_GROUP_PATTERNS: tuple[DefaultGroupPattern, ...] = (
    DefaultGroupPattern.regex(
        r"^defaultresourcegroup-",
        "Azure CLI / Cloud Shell / Visual Studio",
        "Common default resource group created for the region, used by Azure CLI, Cloud Shell, "
        "and Visual Studio for resource deployment",
    ),
    DefaultGroupPattern.regex(
        r"^default-[a-z0-9]+(-[a-z0-9]+)*$",
        "Azure Services",
        "Default resource group created by Azure services for regional deployments",
    ),
    DefaultGroupPattern.regex(
        r"^cloud-shell-storage-[a-z0-9]+$",
        "Azure Cloud Shell",
        "Default storage resource group created by Azure Cloud Shell for persistent storage",
    ),
    DefaultGroupPattern.regex(
        r"^dynamicsdeployments$",
        "Microsoft Dynamics ERP",
        "Automatically created for Microsoft Dynamics ERP non-production instances",
    ),
    DefaultGroupPattern.regex(
        r"^mc_.*_.*_.*$",
        "Azure Kubernetes Service (AKS)",
        "Created when deploying an AKS cluster, contains infrastructure resources for the cluster",
    ),
    DefaultGroupPattern.regex(
        r"^azurebackuprg",
        "Azure Backup",
        "Created by Azure Backup service for backup operations",
    ),
    DefaultGroupPattern.regex(
        r"^networkwatcherrg$",
        "Azure Network Watcher",
        "Created by Azure Network Watcher service for network monitoring",
    ),
    DefaultGroupPattern.regex(
        r"^databricks-rg",
        "Azure Databricks",
        "Created by Azure Databricks service for managed workspace resources",
    ),
    DefaultGroupPattern.regex(
        r"^microsoft-network$",
        "Microsoft Networking Services",
        "Used by Microsoft's networking services",
    ),
    DefaultGroupPattern.regex(
        r"^loganalyticsdefaultresources$",
        "Azure Log Analytics",
        "Created by Azure Log Analytics service for default workspace resources",
    ),
)


class PatternClassifier:
    """Classify resource group names against an ordered pattern table.

    ``classify`` is pure and total: any string, including the empty string,
    yields a ClassificationInfo and never raises.
    """

    def __init__(self, patterns: tuple[DefaultGroupPattern, ...] = DEFAULT_GROUP_PATTERNS):
        self.patterns = patterns

    def classify(self, name: str) -> ClassificationInfo:
        lowered = name.lower()
        for pattern in self.patterns:
            if pattern.matcher(lowered):
                return ClassificationInfo(True, pattern.created_by, pattern.description)
        return UNCLASSIFIED


_default_classifier = PatternClassifier()


def classify(name: str) -> ClassificationInfo:
    """Classify ``name`` with the built-in pattern table."""
    return _default_classifier.classify(name)
