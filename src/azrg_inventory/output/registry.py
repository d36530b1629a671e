"""Renderer registry and selection for a run."""

from __future__ import annotations

import logging
from typing import IO

from azrg_inventory.core.config import InventoryConfig
from azrg_inventory.output.console import ConsoleRenderer
from azrg_inventory.output.csv_writer import CsvRenderer
from azrg_inventory.output.porcelain import PorcelainRenderer

RENDERER_REGISTRY = {
    "console": ConsoleRenderer,
    "porcelain": PorcelainRenderer,
    "csv": CsvRenderer,
}


def get_renderers(config: InventoryConfig, logger: logging.Logger | None = None, stream: IO[str] | None = None):
    """Pick the renderers for ``config``.

    Porcelain or console output always goes to the terminal. A CSV path adds
    a CSV renderer after it; the path is announced except in porcelain mode.
    """
    terminal = RENDERER_REGISTRY["porcelain" if config.porcelain else "console"](stream)
    if not config.output_csv:
        return [terminal]
    csv_renderer = RENDERER_REGISTRY["csv"]
    return [terminal, csv_renderer(config.output_csv, logger=logger, announce=not config.porcelain, stream=stream)]


__all__ = ["RENDERER_REGISTRY", "get_renderers"]
