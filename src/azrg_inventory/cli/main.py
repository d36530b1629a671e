"""CLI entry point for azrginventory."""

from __future__ import annotations

import logging
import sys
from typing import IO

from azrg_inventory.api.client import AzureManagementClient, create_client
from azrg_inventory.cli.parser import parse_arguments
from azrg_inventory.core.colors import ConsoleColors
from azrg_inventory.core.config import InventoryConfig
from azrg_inventory.core.constants import COMMAND_STORAGE_ACCOUNTS
from azrg_inventory.core.credentials import CredentialResolver, bootstrap_dotenv
from azrg_inventory.core.exceptions import ConfigurationError, OutputError, TransportError
from azrg_inventory.core.logging import setup_logging
from azrg_inventory.inventory.aggregator import ResultAggregator
from azrg_inventory.output.registry import get_renderers
from azrg_inventory.pipeline.pool import BoundedWorkerPool
from azrg_inventory.pipeline.processors import CommandRunner, ResourceGroupProcessor, StorageAccountProcessor

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _print_error(msg: str) -> None:
    """Print a coloured error message to stderr."""
    print(ConsoleColors.error(f"ERROR: {msg}"), file=sys.stderr)


def build_processor(
    config: InventoryConfig,
    client: AzureManagementClient,
    pool: BoundedWorkerPool,
    aggregator: ResultAggregator,
):
    if config.command == COMMAND_STORAGE_ACCOUNTS:
        return StorageAccountProcessor(client, pool, aggregator)
    return ResourceGroupProcessor(client, pool, aggregator, list_resources=config.list_resources)


def run_inventory(
    config: InventoryConfig,
    logger: logging.Logger,
    client: AzureManagementClient | None = None,
    stream: IO[str] | None = None,
):
    """Run the configured command and render its report.

    Raises:
        TransportError: A listing call failed
        OutputError: The CSV file could not be written
    """
    if client is None:
        client = create_client(
            config.subscription_id,
            config.access_token,
            retry_config=config.retry,
            max_concurrency=config.workers.max_concurrency,
            logger=logger,
            quiet_retries=config.porcelain,
        )
    pool = BoundedWorkerPool(
        config.workers.max_concurrency,
        logger=logger,
        show_progress=config.workers.show_progress,
    )
    processor = build_processor(config, client, pool, ResultAggregator(limits=config.limits))
    runner = CommandRunner(
        get_renderers(config, logger=logger, stream=stream),
        logger=logger,
        announce=not (config.porcelain or config.quiet),
        stream=stream,
    )
    with client:
        return runner.run(processor)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, resolve credentials and run one inventory command."""
    # .env values must be visible before argument defaults are read
    bootstrap_dotenv(logging.getLogger(__name__))
    args = parse_arguments(argv)

    logger = setup_logging(
        args.log_level,
        log_format=args.log_format,
        file_logging=not args.no_log_file,
        porcelain=args.porcelain or args.quiet,
    )
    if args.porcelain:
        ConsoleColors.set_enabled(False)

    try:
        credentials = CredentialResolver(logger, use_credential_chain=not args.no_credential_chain).resolve(
            args.subscription_id, args.access_token
        )
    except ConfigurationError as e:
        _print_error(str(e))
        return EXIT_CONFIG_ERROR

    config = InventoryConfig.from_args(args, credentials.subscription_id, credentials.access_token)
    logger.debug(f"Running {config.command} with max concurrency {config.workers.max_concurrency}")

    try:
        run_inventory(config, logger)
    except TransportError as e:
        logger.debug("Listing failed", exc_info=True)
        _print_error(f"Error fetching {config.command.replace('-', ' ')}: {e}")
        return EXIT_ERROR
    except OutputError as e:
        _print_error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        _print_error("Interrupted")
        return EXIT_INTERRUPTED
    return EXIT_OK


def cli_entry() -> None:
    sys.exit(main())
