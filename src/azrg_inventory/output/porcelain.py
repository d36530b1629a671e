"""Tab-separated output for scripts (``--porcelain``)."""

from __future__ import annotations

import sys
from typing import IO

from azrg_inventory.core.constants import (
    NOT_AVAILABLE,
    PORCELAIN_ERROR,
    PORCELAIN_NOT_AVAILABLE,
    RESOURCE_GROUP_PORCELAIN_HEADER,
)
from azrg_inventory.output.formatting import created_cell
from azrg_inventory.pipeline.processors import ResourceGroupReport, StorageAccountReport


def _clean(value: str) -> str:
    # Tabs or newlines inside a field would break row parsing
    return value.replace("\t", " ").replace("\n", " ")


class PorcelainRenderer:
    """One line per entity, fields separated by tabs, no colors or progress."""

    def __init__(self, stream: IO[str] | None = None):
        self._stream = stream

    @property
    def stream(self) -> IO[str]:
        return self._stream or sys.stdout

    def _write_row(self, fields: list[str]) -> None:
        self.stream.write("\t".join(_clean(field) for field in fields) + "\n")

    def render(self, report) -> None:
        if isinstance(report, ResourceGroupReport):
            self._write_row(RESOURCE_GROUP_PORCELAIN_HEADER)
            for row in report.view.rows:
                group = row.entity
                self._write_row(
                    [
                        group.name,
                        group.location,
                        group.provisioning_state,
                        created_cell(row, PORCELAIN_ERROR, PORCELAIN_NOT_AVAILABLE),
                        "true" if row.classification.is_default else "false",
                    ]
                )
        elif isinstance(report, StorageAccountReport):
            for row in report.view.rows:
                account = row.entity
                self._write_row(
                    [
                        account.name,
                        account.location,
                        account.effective_account_type,
                        account.provisioning_state,
                        created_cell(row, PORCELAIN_ERROR, NOT_AVAILABLE),
                    ]
                )
        else:
            raise TypeError(f"Unsupported report type: {type(report).__name__}")
