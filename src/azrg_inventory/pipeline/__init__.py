"""Pipeline module - Bounded fan-out of per-entity detail fetches.

Command processors live in ``azrg_inventory.pipeline.processors``.
"""

from azrg_inventory.pipeline.models import DetailResult, FailureReason
from azrg_inventory.pipeline.pool import BoundedWorkerPool

__all__ = ["BoundedWorkerPool", "DetailResult", "FailureReason"]
