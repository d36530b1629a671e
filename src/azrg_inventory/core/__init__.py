"""Core module - Foundation components with no dependencies on other subpackages.

- Version information
- Custom exceptions
- Configuration dataclasses
- Constants and defaults
- Console colors and performance tracking
"""

from azrg_inventory.core.colors import ConsoleColors
from azrg_inventory.core.config import (
    InventoryConfig,
    LogConfig,
    RetryConfig,
    StorageLimitConfig,
    WorkerConfig,
    coerce_concurrency,
)
from azrg_inventory.core.exceptions import (
    FETCH_HTTP_STATUS,
    FETCH_RATE_LIMITED,
    FETCH_TRANSPORT,
    ConfigurationError,
    FetchError,
    InventoryError,
    OutputError,
    ParseError,
    TransportError,
)
from azrg_inventory.core.perf import PerformanceTracker
from azrg_inventory.core.version import __version__

__all__ = [
    "FETCH_HTTP_STATUS",
    "FETCH_RATE_LIMITED",
    "FETCH_TRANSPORT",
    "ConfigurationError",
    "ConsoleColors",
    "FetchError",
    "InventoryConfig",
    "InventoryError",
    "LogConfig",
    "OutputError",
    "ParseError",
    "PerformanceTracker",
    "RetryConfig",
    "StorageLimitConfig",
    "TransportError",
    "WorkerConfig",
    "__version__",
    "coerce_concurrency",
]
