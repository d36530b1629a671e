"""Logging helpers for azrg-inventory.

Console logs go to stderr so that report output on stdout (human, porcelain
or CSV path notices) stays clean for pipes. Every handler carries a
``SensitiveDataFilter`` because bearer tokens travel through the HTTP layer
and must never reach a log file.
"""

import json
import logging
import os
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from azrg_inventory.core.constants import LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES, LOG_FILE_PREFIX

REDACTED = "[REDACTED]"
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
TEXT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# "Authorization: Bearer <token>" and quoted header dumps
_AUTH_HEADER = re.compile(
    r"""(?i)(["']?authorization["']?\s*[:=]\s*["']?)([A-Za-z]+)\s+[A-Za-z0-9._~+/=-]+"""
)
# access_token=..., "client_secret": "...", token: ...
_SECRET_PAIR = re.compile(
    r"""(?ix)
    (["']?(?<![A-Za-z0-9_])(?:access[_-]?token|client[_-]?secret|bearer[_-]?token|password|secret|token)["']?
    \s*[:=]\s*)
    ("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^,\s;}\]]+)
    """
)
_BARE_BEARER = re.compile(r"(?i)\b(bearer)\s+(?!\[REDACTED\])[A-Za-z0-9._~+/=-]+")


def _mask_secret(match: re.Match) -> str:
    value = match.group(2)
    quote = value[0] if len(value) >= 2 and value[0] in "'\"" and value[-1] == value[0] else ""
    return f"{match.group(1)}{quote}{REDACTED}{quote}"


def redact_message(message: str) -> str:
    """Mask bearer tokens, Authorization headers and token-like key/value pairs."""
    message = _AUTH_HEADER.sub(lambda m: f"{m.group(1)}{m.group(2)} {REDACTED}", message)
    message = _SECRET_PAIR.sub(_mask_secret, message)
    return _BARE_BEARER.sub(lambda m: f"{m.group(1)} {REDACTED}", message)


def _render_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except (TypeError, ValueError):
        # Mismatched %-placeholders; keep the raw template
        return f"{record.msg} [log-message-format-error]"


class SensitiveDataFilter(logging.Filter):
    """Redact credentials from the fully formatted message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_message(_render_message(record))
        record.args = ()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = dict(
            timestamp=datetime.fromtimestamp(record.created, UTC).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=redact_message(_render_message(record)),
            module=record.module,
            function=record.funcName,
            line=record.lineno,
            thread_name=record.threadName,
        )
        if record.exc_info:
            entry["exception"] = redact_message(self.formatException(record.exc_info))
        return json.dumps(entry, default=str)


_current_log_file: Path | None = None


def get_current_log_file() -> Path | None:
    """Return the log file opened by the last ``setup_logging`` call."""
    return _current_log_file


def _resolve_level(log_level: str | None) -> int:
    name = (log_level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    if name not in VALID_LOG_LEVELS:
        print(f"Warning: Invalid log level '{log_level}', using INFO", file=sys.stderr)
        name = "INFO"
    return getattr(logging, name)


def _new_log_file(log_dir: str | Path) -> Path | None:
    directory = Path(log_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Warning: Cannot create logs directory: {e}. Logging to console only.", file=sys.stderr)
        return None
    return directory / f"{LOG_FILE_PREFIX}_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S')}.log"


def setup_logging(
    log_level: str | None = None,
    log_format: str = "text",
    file_logging: bool = True,
    log_dir: str | Path = "logs",
    porcelain: bool = False,
) -> logging.Logger:
    """Configure console and rotating file logging on the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Falls back to the
            LOG_LEVEL environment variable, then INFO.
        log_format: "text" (default) or "json"
        file_logging: Also write to ``<log_dir>/azrginventory_<timestamp>.log``
        log_dir: Directory for log files
        porcelain: Only WARNING and above reach the console

    Returns:
        The package logger
    """
    global _current_log_file

    level = _resolve_level(log_level)
    log_file = _new_log_file(log_dir) if file_logging else None

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(max(level, logging.WARNING) if porcelain else level)
    handlers: list[logging.Handler] = [console]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT, encoding="utf-8"
            )
        )

    formatter = JSONFormatter() if log_format.lower() == "json" else logging.Formatter(TEXT_LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(SensitiveDataFilter())
        root.addHandler(handler)
    root.setLevel(level)

    _current_log_file = log_file
    logger = logging.getLogger("azrg_inventory")
    logger.setLevel(logging.NOTSET)
    logger.debug(f"Logging initialized. Log file: {log_file}" if log_file else "Logging initialized. Console only.")
    return logger
