"""Command-line argument parsing for azrginventory."""

from __future__ import annotations

import argparse
import os

import argcomplete

from azrg_inventory.core.config import env_numeric_default
from azrg_inventory.core.constants import (
    COMMAND_RESOURCE_GROUPS,
    COMMAND_STORAGE_ACCOUNTS,
    COMMANDS,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RETRY,
)
from azrg_inventory.core.logging import VALID_LOG_LEVELS
from azrg_inventory.core.version import __version__

EPILOG = """
Examples:
  # Inventory resource groups with their creation times
  azrginventory --subscription-id 00000000-0000-0000-0000-000000000000

  # Use a token from the Azure CLI
  export AZURE_ACCESS_TOKEN=$(az account get-access-token --query accessToken -o tsv)
  azrginventory --subscription-id $AZURE_SUBSCRIPTION_ID

  # List every resource in each resource group
  azrginventory --list-resources

  # Tab-separated output for scripts
  azrginventory --porcelain | awk -F'\\t' '$5 == "true"'

  # Export to CSV with lower concurrency
  azrginventory --output-csv groups.csv --max-concurrency 3

  # Storage accounts with per-region limit analysis
  azrginventory storage-accounts

Environment variables:
  AZURE_SUBSCRIPTION_ID   Subscription ID (when --subscription-id is omitted)
  AZURE_ACCESS_TOKEN      Bearer token (when --access-token is omitted)
  MAX_CONCURRENCY         Default for --max-concurrency
  MAX_RETRIES             Default for --max-retries
  RETRY_BASE_DELAY        Default for --retry-base-delay
  RETRY_MAX_JITTER        Default for --retry-max-jitter
  LOG_LEVEL               Default for --log-level
  LOG_FORMAT              Default for --log-format
  Variables may also be placed in a .env file in the working directory.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azrginventory",
        description="Inventory Azure resource groups and storage accounts with their creation times",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )

    parser.add_argument(
        "command",
        nargs="?",
        default=COMMAND_RESOURCE_GROUPS,
        choices=COMMANDS,
        help=f"What to inventory (default: {COMMAND_RESOURCE_GROUPS}). "
        f"'{COMMAND_STORAGE_ACCOUNTS}' also identifies accounts approaching per-region limits",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # ==================== CREDENTIALS ====================

    auth_group = parser.add_argument_group("Credentials")
    auth_group.add_argument(
        "--subscription-id", type=str, default=None, help="Azure subscription ID (or AZURE_SUBSCRIPTION_ID env var)"
    )
    auth_group.add_argument(
        "--access-token", type=str, default=None, help="Azure access token (or AZURE_ACCESS_TOKEN env var)"
    )
    auth_group.add_argument(
        "--no-credential-chain",
        action="store_true",
        help="Do not fall back to DefaultAzureCredential (az login, managed identity) when no token is given",
    )

    # ==================== OUTPUT ====================

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "--list-resources",
        action="store_true",
        help="List all resources in each resource group with their creation times",
    )
    output_group.add_argument(
        "--output-csv", type=str, default="", metavar="PATH", help="Output results to CSV file (specify file path)"
    )
    output_group.add_argument(
        "--porcelain",
        action="store_true",
        help="Output results in a machine-readable format optimized for scripts "
        "(tab-separated values, no progress bar)",
    )
    output_group.add_argument("--quiet", "-q", action="store_true", help="Suppress progress bars and notices")

    # ==================== CONCURRENCY & RETRIES ====================

    reliability_group = parser.add_argument_group("Concurrency & Retries")
    reliability_group.add_argument(
        "--max-concurrency",
        type=int,
        default=env_numeric_default("MAX_CONCURRENCY", int, DEFAULT_MAX_CONCURRENCY),
        help=f"Maximum number of concurrent API calls (minimum: 1, default: {DEFAULT_MAX_CONCURRENCY}, "
        "or MAX_CONCURRENCY env var)",
    )
    reliability_group.add_argument(
        "--max-retries",
        type=int,
        default=env_numeric_default("MAX_RETRIES", int, DEFAULT_RETRY.max_retries),
        help=f"Retries after HTTP 429 responses (default: {DEFAULT_RETRY.max_retries}, or MAX_RETRIES env var)",
    )
    reliability_group.add_argument(
        "--retry-base-delay",
        type=float,
        default=env_numeric_default("RETRY_BASE_DELAY", float, DEFAULT_RETRY.base_delay),
        help=f"Initial backoff delay in seconds, doubled per retry (default: {DEFAULT_RETRY.base_delay}, "
        "or RETRY_BASE_DELAY env var)",
    )
    reliability_group.add_argument(
        "--retry-max-jitter",
        type=float,
        default=env_numeric_default("RETRY_MAX_JITTER", float, DEFAULT_RETRY.max_jitter),
        help=f"Maximum random seconds added to each backoff (default: {DEFAULT_RETRY.max_jitter}, "
        "or RETRY_MAX_JITTER env var)",
    )
    reliability_group.add_argument("--no-jitter", action="store_true", help="Disable random backoff jitter")

    # ==================== LOGGING ====================

    log_group = parser.add_argument_group("Logging")
    log_group.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "INFO").upper(),
        choices=VALID_LOG_LEVELS,
        help="Logging level (default: INFO, or LOG_LEVEL environment variable)",
    )
    log_group.add_argument(
        "--log-format",
        type=str,
        default=os.environ.get("LOG_FORMAT", "text").lower(),
        choices=["text", "json"],
        help='Log output format: "text" (default) for human-readable, "json" for structured logging '
        "(or LOG_FORMAT environment variable)",
    )
    log_group.add_argument("--no-log-file", action="store_true", help="Do not write a log file under ./logs")

    return parser


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
