"""Inventory module - Entity models, name classification and result aggregation."""

from azrg_inventory.inventory.aggregator import (
    AggregateRow,
    AggregateView,
    ResultAggregator,
    StorageSummary,
    oldest_first,
)
from azrg_inventory.inventory.classifier import PatternClassifier, classify
from azrg_inventory.inventory.models import (
    ClassificationInfo,
    Resource,
    ResourceGroup,
    ResourceGroupDetail,
    StorageAccount,
)

__all__ = [
    "AggregateRow",
    "AggregateView",
    "ClassificationInfo",
    "PatternClassifier",
    "Resource",
    "ResourceGroup",
    "ResourceGroupDetail",
    "ResultAggregator",
    "StorageAccount",
    "StorageSummary",
    "classify",
    "oldest_first",
]
