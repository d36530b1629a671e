"""Command processors: list entities, fan out detail fetches, aggregate.

Each processor runs one command end to end and returns a report object
that any number of renderers can consume.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import IO, Protocol

from azrg_inventory.api.client import AzureManagementClient
from azrg_inventory.core.perf import PerformanceTracker
from azrg_inventory.inventory.aggregator import AggregateView, ResultAggregator, StorageSummary
from azrg_inventory.inventory.models import ResourceGroup, ResourceGroupDetail, StorageAccount, earliest_created_time
from azrg_inventory.pipeline.pool import BoundedWorkerPool


@dataclass
class ResourceGroupReport:
    view: AggregateView
    list_resources: bool = False


@dataclass
class StorageAccountReport:
    summary: StorageSummary

    @property
    def view(self) -> AggregateView:
        return self.summary.view


class CommandProcessor(Protocol):
    name: str

    def run(self): ...


class Renderer(Protocol):
    def render(self, report) -> None: ...


class ResourceGroupProcessor:
    """Inventory resource groups and their creation times.

    The creation time of a group is the earliest creation time among its
    resources. With ``list_resources`` the resources themselves are kept
    for rendering.
    """

    name = "resource groups"

    def __init__(
        self,
        client: AzureManagementClient,
        pool: BoundedWorkerPool,
        aggregator: ResultAggregator | None = None,
        list_resources: bool = False,
    ):
        self.client = client
        self.pool = pool
        self.aggregator = aggregator or ResultAggregator()
        self.list_resources = list_resources

    def fetch_detail(self, group: ResourceGroup) -> ResourceGroupDetail:
        if self.list_resources:
            resources = tuple(self.client.list_resources(group))
            return ResourceGroupDetail(earliest_created_time(resources), resources)
        return ResourceGroupDetail(self.client.fetch_created_time(group))

    def run(self) -> ResourceGroupReport:
        groups = self.client.list_resource_groups()
        results = self.pool.run(groups, self.fetch_detail, description="Resource groups")
        return ResourceGroupReport(self.aggregator.aggregate(results), self.list_resources)


class StorageAccountProcessor:
    """Inventory storage accounts and analyse per-region limits.

    Creation times arrive with the listing, so the per-account step only
    parses them; no further requests are made.
    """

    name = "storage accounts"

    def __init__(
        self,
        client: AzureManagementClient,
        pool: BoundedWorkerPool,
        aggregator: ResultAggregator | None = None,
    ):
        self.client = client
        self.pool = pool
        self.aggregator = aggregator or ResultAggregator()

    def run(self) -> StorageAccountReport:
        accounts = self.client.list_storage_accounts()
        results = self.pool.run(accounts, StorageAccount.resolve_created_time, description="Storage accounts")
        return StorageAccountReport(self.aggregator.summarize_storage(results))


class CommandRunner:
    """Run a processor, time it and hand the report to every renderer."""

    def __init__(
        self,
        renderers: list[Renderer],
        logger: logging.Logger | None = None,
        announce: bool = True,
        stream: IO[str] | None = None,
    ):
        self.renderers = renderers
        self.logger = logger or logging.getLogger(__name__)
        self.announce = announce
        self.stream = stream
        self.perf_tracker = PerformanceTracker(self.logger)

    def run(self, processor: CommandProcessor):
        if self.announce:
            print(f"Fetching {processor.name}...", file=self.stream or sys.stdout)
        with self.perf_tracker.time_operation(f"fetch {processor.name}"):
            report = processor.run()
        for renderer in self.renderers:
            renderer.render(report)
        return report
