"""CSV report output (``--output-csv``)."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO

import pandas as pd

from azrg_inventory.core.constants import (
    NOT_AVAILABLE,
    RESOURCE_GROUP_CSV_COLUMNS,
    STORAGE_ACCOUNT_CSV_COLUMNS,
)
from azrg_inventory.core.exceptions import OutputError
from azrg_inventory.inventory.aggregator import AggregateView
from azrg_inventory.output.formatting import created_cell, resources_cell
from azrg_inventory.pipeline.processors import ResourceGroupReport, StorageAccountReport


def resource_group_frame(view: AggregateView, list_resources: bool = False) -> pd.DataFrame:
    """One row per resource group, in input order."""
    records = []
    for row in view.rows:
        group = row.entity
        info = row.classification
        records.append(
            {
                "ResourceGroupName": group.name,
                "Location": group.location,
                "ProvisioningState": group.provisioning_state,
                "CreatedTime": created_cell(row, "Error: {error}", NOT_AVAILABLE),
                "IsDefault": "true" if info.is_default else "false",
                "CreatedBy": info.created_by,
                "Description": info.description,
                "Resources": resources_cell(row) if list_resources else "",
            }
        )
    return pd.DataFrame(records, columns=RESOURCE_GROUP_CSV_COLUMNS)


def storage_account_frame(view: AggregateView) -> pd.DataFrame:
    """One row per storage account, failures included with their reason."""
    records = []
    for row in view.rows:
        account = row.entity
        records.append(
            {
                "StorageAccountName": account.name,
                "Location": account.location,
                "AccountType": account.effective_account_type,
                "ProvisioningState": account.provisioning_state,
                "CreatedTime": created_cell(row, "Error: {error}", NOT_AVAILABLE),
                "ResourceGroup": account.resource_group,
                "BlobEndpoint": account.blob_endpoint,
                "QueueEndpoint": account.queue_endpoint,
                "TableEndpoint": account.table_endpoint,
                "FileEndpoint": account.file_endpoint,
                "Error": "" if row.ok else str(row.result.error),
            }
        )
    return pd.DataFrame(records, columns=STORAGE_ACCOUNT_CSV_COLUMNS)


class CsvRenderer:
    """Write the report to a CSV file.

    Args:
        output_path: Destination file; parent directories are created
        logger: Logger instance
        announce: Print the output path when done
        stream: Where the announcement goes (default: stdout)
    """

    def __init__(
        self,
        output_path: str | Path,
        logger: logging.Logger | None = None,
        announce: bool = True,
        stream: IO[str] | None = None,
    ):
        self.output_path = Path(output_path)
        self.logger = logger or logging.getLogger(__name__)
        self.announce = announce
        self._stream = stream

    def render(self, report) -> None:
        if isinstance(report, ResourceGroupReport):
            frame = resource_group_frame(report.view, report.list_resources)
        elif isinstance(report, StorageAccountReport):
            frame = storage_account_frame(report.view)
        else:
            raise TypeError(f"Unsupported report type: {type(report).__name__}")
        self.write(frame)
        if self.announce:
            print(f"CSV output written to: {self.output_path}", file=self._stream or sys.stdout)

    def write(self, frame: pd.DataFrame) -> Path:
        try:
            if self.output_path.parent != Path(""):
                self.output_path.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(self.output_path, index=False, encoding="utf-8")
        except PermissionError as e:
            self.logger.error(f"Permission denied creating CSV file: {e}")
            raise OutputError("Failed to write CSV file", output_path=str(self.output_path), details=str(e)) from e
        except OSError as e:
            self.logger.error(f"OS error creating CSV file: {e}")
            raise OutputError("Failed to write CSV file", output_path=str(self.output_path), details=str(e)) from e
        self.logger.info(f"✓ Created CSV: {self.output_path} ({len(frame)} rows)")
        return self.output_path
