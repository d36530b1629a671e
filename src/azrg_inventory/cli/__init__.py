"""CLI module - Command-line interface components."""

from azrg_inventory.cli.main import main
from azrg_inventory.cli.parser import parse_arguments

__all__ = ["main", "parse_arguments"]
