"""Human-readable console output."""

from __future__ import annotations

import sys
from typing import IO

from azrg_inventory.core.colors import ConsoleColors
from azrg_inventory.core.constants import NOT_AVAILABLE, OLDEST_DATE_FORMAT
from azrg_inventory.inventory.aggregator import (
    SEVERITY_CRITICAL,
    SEVERITY_WARNING,
    AggregateRow,
    StorageSummary,
)
from azrg_inventory.inventory.models import format_timestamp
from azrg_inventory.output.formatting import created_cell
from azrg_inventory.pipeline.processors import ResourceGroupReport, StorageAccountReport


class ConsoleRenderer:
    """Print reports in the multi-line format meant for people."""

    def __init__(self, stream: IO[str] | None = None):
        self._stream = stream

    @property
    def stream(self) -> IO[str]:
        return self._stream or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def render(self, report) -> None:
        if isinstance(report, ResourceGroupReport):
            self.render_resource_groups(report)
        elif isinstance(report, StorageAccountReport):
            self.render_storage_accounts(report.summary)
        else:
            raise TypeError(f"Unsupported report type: {type(report).__name__}")

    # ==================== RESOURCE GROUPS ====================

    def render_resource_groups(self, report: ResourceGroupReport) -> None:
        view = report.view
        self._print(f"Found {len(view.rows)} resource groups:")
        self._print()
        for row in view.rows:
            self._render_group(row, report.list_resources)

        summary = f"{len(view.rows)} resource groups, {view.default_count} default"
        if view.failure_count:
            self._print(ConsoleColors.warning(f"{summary}, {view.failure_count} could not be fetched"))
        else:
            self._print(ConsoleColors.success(summary))

    def _render_group(self, row: AggregateRow, list_resources: bool) -> None:
        group = row.entity
        self._print(f"Resource Group: {ConsoleColors.bold(group.name)}")
        self._print(f"  Location: {group.location}")
        self._print(f"  Provisioning State: {group.provisioning_state}")

        info = row.classification
        if info.is_default:
            self._print(ConsoleColors.info("  🔍 DEFAULT RESOURCE GROUP DETECTED"))
            self._print(f"  📋 Created By: {info.created_by}")
            self._print(f"  📝 Description: {info.description}")

        if list_resources:
            self._render_resources(row)
        elif row.ok:
            self._print(f"  Created Time: {created_cell(row, '', NOT_AVAILABLE)}")
        else:
            self._print(ConsoleColors.error(f"  Created Time: Error fetching ({row.result.error})"))
        self._print()

    def _render_resources(self, row: AggregateRow) -> None:
        if not row.ok:
            self._print(ConsoleColors.error(f"  Error listing resources: {row.result.error}"))
            return
        resources = row.result.value.resources or ()
        if not resources:
            self._print("  No resources found in this resource group")
            return
        self._print(f"  Resources ({len(resources)}):")
        for resource in resources:
            self._print(f"    - {resource.name} ({resource.type})")
            created = format_timestamp(resource.created_time) if resource.created_time else NOT_AVAILABLE
            self._print(f"      Created: {created}")

    # ==================== STORAGE ACCOUNTS ====================

    def render_storage_accounts(self, summary: StorageSummary) -> None:
        view = summary.view
        if not view.rows:
            self._print("No storage accounts found in this subscription.")
            return
        self._print(f"Found {len(view.rows)} storage accounts:")
        self._print()

        for row in view.failures:
            self._print(
                ConsoleColors.error(f"Error processing storage account {row.entity.name}: {row.result.error}")
            )

        self._print("=== STORAGE ACCOUNT SUMMARY BY LOCATION ===")
        for location in view.locations:
            self._print()
            self._print(f"Location: {location.location}")
            for account_type, count in location.by_type.items():
                self._print(f"  {account_type}: {count} accounts")
            self._print(f"  Total: {location.total} accounts")
            if location.approaching_limit:
                self._print(
                    ConsoleColors.warning(
                        f"  ⚠️  WARNING: Approaching limit of {summary.limits.region_limit} "
                        "storage accounts per region!"
                    )
                )
            if location.at_limit:
                self._print(
                    ConsoleColors.error(
                        f"  🚨 ERROR: At limit of {summary.limits.region_limit} storage accounts per region!"
                    )
                )

        self._print()
        self._print("=== STANDARD DNS ENDPOINT ANALYSIS ===")
        for dns in summary.dns_endpoints:
            self._print()
            self._print(f"Location: {dns.location} - Standard DNS accounts: {dns.count}")
            if dns.severity == SEVERITY_CRITICAL:
                self._print(
                    ConsoleColors.error(f"  🚨 CRITICAL: {dns.count} Standard DNS accounts (limit is {dns.limit})")
                )
                self._print(
                    "  This is likely causing the error: 'Subscription already contains "
                    f"{dns.count} storage accounts with Standard Dns endpoints'"
                )
            elif dns.severity == SEVERITY_WARNING:
                self._print(
                    ConsoleColors.warning(
                        f"  ⚠️  WARNING: {dns.count} Standard DNS accounts (approaching limit of {dns.limit})"
                    )
                )
            if dns.oldest:
                self._print("  Oldest Standard DNS accounts in this location:")
                for row in dns.oldest:
                    created = row.created_time.strftime(OLDEST_DATE_FORMAT) if row.created_time else NOT_AVAILABLE
                    self._print(f"    - {row.entity.name} (Created: {created})")

        self._print()
        self._print("=== DETAILED STORAGE ACCOUNT INFORMATION ===")
        for row in view.successes:
            self._render_account(row)

        self._print()
        self._print("=== RECOMMENDATIONS ===")
        for recommendation in summary.recommendations:
            self._print(recommendation.heading)
            for action in recommendation.actions:
                self._print(f"  - {action}")

    def _render_account(self, row: AggregateRow) -> None:
        account = row.entity
        self._print()
        self._print(f"Storage Account: {ConsoleColors.bold(account.name)}")
        self._print(f"  Location: {account.location}")
        account_type = account.effective_account_type
        if account.account_type_inferred:
            account_type += " (inferred)"
        self._print(f"  Account Type: {account_type}")
        self._print(f"  Provisioning State: {account.provisioning_state}")
        self._print(f"  Created: {created_cell(row, 'Error fetching ({error})')}")
        for label, endpoint in (
            ("Blob", account.blob_endpoint),
            ("Queue", account.queue_endpoint),
            ("Table", account.table_endpoint),
            ("File", account.file_endpoint),
        ):
            if endpoint:
                self._print(f"  {label} Endpoint: {endpoint}")
