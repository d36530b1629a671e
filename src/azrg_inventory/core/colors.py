"""ANSI styling for console reports.

Styling is off whenever stdout is not a terminal, and ``--porcelain``
switches it off explicitly, so piped output never carries escape codes.
"""

import os
import sys


class ConsoleColors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    _enabled = sys.stdout.isatty() and (os.name != "nt" or bool(os.environ.get("TERM")))

    @classmethod
    def set_enabled(cls, enabled: bool) -> None:
        cls._enabled = enabled

    @classmethod
    def is_enabled(cls) -> bool:
        return cls._enabled

    @classmethod
    def _paint(cls, code: str, text: str) -> str:
        return f"{code}{text}{cls.RESET}" if cls._enabled else text

    @classmethod
    def success(cls, text: str) -> str:
        """Summary lines with no failures"""
        return cls._paint(cls.GREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        """Per-entity failures and fatal errors"""
        return cls._paint(cls.RED, text)

    @classmethod
    def warning(cls, text: str) -> str:
        """Regions approaching a limit"""
        return cls._paint(cls.YELLOW, text)

    @classmethod
    def info(cls, text: str) -> str:
        return cls._paint(cls.CYAN, text)

    @classmethod
    def bold(cls, text: str) -> str:
        return cls._paint(cls.BOLD, text)
