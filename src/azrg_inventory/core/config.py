"""Configuration dataclasses for azrg-inventory.

These dataclasses centralize all configuration options so that the worker
pool, transport and aggregator receive an explicit value instead of reading
process-wide state. They can be created from command-line arguments or used
directly in code and tests.
"""

from __future__ import annotations

import argparse
import logging
import math
import os
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RetryConfig:
    """Configuration for rate-limit retries with exponential backoff.

    Attributes:
        max_retries: Retries allowed after the first 429 response (default: 5)
        base_delay: Initial delay in seconds (default: 1.0)
        max_jitter: Upper bound of the random delay added per retry (default: 1.0)
        jitter: Add randomization to delays (default: True)
    """

    max_retries: int = 5
    base_delay: float = 1.0
    max_jitter: float = 1.0
    jitter: bool = True

    def delay_for(self, attempt: int, rng: random.Random | None = None) -> float:
        """Return the sleep before retry number ``attempt`` (0-based)."""
        delay = self.base_delay * (2**attempt)
        if self.jitter and self.max_jitter > 0:
            delay += (rng or random).uniform(0, self.max_jitter)
        return delay


@dataclass
class WorkerConfig:
    """Configuration for the bounded worker pool.

    Attributes:
        max_concurrency: Maximum simultaneous detail fetches (default: 10)
        show_progress: Display a tqdm progress bar while fetching (default: True)
    """

    max_concurrency: int = 10
    show_progress: bool = True


@dataclass
class StorageLimitConfig:
    """Per-region storage account thresholds.

    Attributes:
        region_limit: Storage accounts allowed per region (default: 250)
        region_warning: Count at which the region is reported as approaching the limit (default: 200)
        dns_limit: Standard DNS endpoint accounts allowed (default: 260)
        dns_warning: Standard DNS count reported as a warning (default: 200)
        dns_critical: Standard DNS count reported as critical (default: 240)
        oldest_count: Oldest accounts listed per region (default: 5)
        recommendation_threshold: Region total that triggers cleanup advice (default: 240)
    """

    region_limit: int = 250
    region_warning: int = 200
    dns_limit: int = 260
    dns_warning: int = 200
    dns_critical: int = 240
    oldest_count: int = 5
    recommendation_threshold: int = 240


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level string (default: "INFO")
        log_format: "text" or "json" (default: "text")
        file_logging: Write a rotating log file under ``log_dir`` (default: True)
        log_dir: Directory for log files (default: "logs")
        file_max_bytes: Maximum size per log file (default: 10MB)
        file_backup_count: Number of backup log files (default: 5)
    """

    level: str = "INFO"
    log_format: str = "text"
    file_logging: bool = True
    log_dir: str = "logs"
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


def _parse_env_numeric(value: str | None, cast: Callable[[str], Any]) -> Any | None:
    """Parse an environment value, returning None when invalid."""
    if value is None:
        return None
    try:
        parsed = cast(value)
    except (TypeError, ValueError):
        return None
    if isinstance(parsed, float) and not math.isfinite(parsed):
        return None
    return parsed


def env_numeric_default(name: str, cast: Callable[[str], Any], default: Any) -> Any:
    """Return a numeric default taken from environment variable ``name``.

    Invalid or negative values are ignored with a warning and ``default`` is used.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    parsed = _parse_env_numeric(raw, cast)
    if parsed is None or parsed < 0:
        logging.getLogger(__name__).warning(f"Ignoring invalid {name}={raw!r}; using default {default}")
        return default
    return parsed


def coerce_concurrency(value: int, logger: logging.Logger | None = None) -> int:
    """Clamp a concurrency budget to at least 1.

    A zero-capacity admission gate would block every task forever, so values
    below 1 are replaced with 1 and a warning is logged.
    """
    if value < 1:
        (logger or logging.getLogger(__name__)).warning(
            f"⚠ Concurrency ({value}) is less than 1, setting to 1 to prevent hanging"
        )
        return 1
    return value


@dataclass
class InventoryConfig:
    """Complete configuration for one inventory run.

    Attributes:
        subscription_id: Azure subscription to inventory
        access_token: Bearer token for the Azure Management API
        command: "resource-groups" or "storage-accounts"
        list_resources: List every resource in each resource group
        output_csv: CSV output path, empty to skip CSV output
        porcelain: Tab-separated machine-readable output
        quiet: Suppress progress and informational console output
    """

    subscription_id: str = ""
    access_token: str = field(default="", repr=False)
    command: str = "resource-groups"
    list_resources: bool = False
    output_csv: str = ""
    porcelain: bool = False
    quiet: bool = False
    retry: RetryConfig = field(default_factory=RetryConfig)
    workers: WorkerConfig = field(default_factory=WorkerConfig)
    limits: StorageLimitConfig = field(default_factory=StorageLimitConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def __post_init__(self):
        self.workers.max_concurrency = coerce_concurrency(self.workers.max_concurrency)
        if self.porcelain or self.quiet:
            self.workers.show_progress = False

    @classmethod
    def from_args(
        cls, args: argparse.Namespace, subscription_id: str = "", access_token: str = ""
    ) -> InventoryConfig:
        """Create configuration from parsed command-line arguments.

        Credentials are resolved separately and passed in explicitly.
        """
        max_concurrency = getattr(args, "max_concurrency", 10)
        if max_concurrency == 0:
            # 0 means "unset" on the command line
            max_concurrency = 10
        return cls(
            subscription_id=subscription_id,
            access_token=access_token,
            command=getattr(args, "command", None) or "resource-groups",
            list_resources=getattr(args, "list_resources", False),
            output_csv=getattr(args, "output_csv", None) or "",
            porcelain=getattr(args, "porcelain", False),
            quiet=getattr(args, "quiet", False),
            retry=RetryConfig(
                max_retries=getattr(args, "max_retries", 5),
                base_delay=getattr(args, "retry_base_delay", 1.0),
                max_jitter=getattr(args, "retry_max_jitter", 1.0),
                jitter=not getattr(args, "no_jitter", False),
            ),
            workers=WorkerConfig(max_concurrency=max_concurrency),
            log=LogConfig(
                level=getattr(args, "log_level", "INFO"),
                log_format=getattr(args, "log_format", "text"),
                file_logging=not getattr(args, "no_log_file", False),
            ),
        )
