"""
Logger Utility
==============

Context-tagged, colour-coded logging for the bot.

Every component creates its own logger so each line says where it came
from:

    [2025-01-31T10:30:00] [INFO] [Agent] Decision: transfer_hbar_tool

The minimum level comes from LOG_LEVEL (debug, info, warning, error).
Errors go to stderr, everything else to stdout. Chat replies in the CLI
are printed to stdout too, so run with LOG_LEVEL=warning for a quiet
terminal.

Usage:
    from hederabot.utils.logger import Logger

    logger = Logger("Reasoner")
    logger.info("Calling model")
    logger.debug("Payload", {"model": "meta-llama/Llama-3.1-8B-Instruct"})

    stage_logger = logger.child("Decision")   # [Reasoner:Decision]
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Numeric log levels; higher is more severe."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def _get_log_level_from_env() -> LogLevel:
    """Parse LOG_LEVEL, defaulting to INFO for unknown values."""
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return _LEVEL_NAMES.get(level_str, LogLevel.INFO)


class Logger:
    """
    A logger bound to a component name.

    Example:
        logger = Logger("ToolExecutor")
        logger.warning("Tool failed", {"tool": "transfer_hbar_tool"})
        logger.error("Reasoner call failed", exc)
    """

    def __init__(self, context: str = ""):
        """
        Args:
            context: Component name printed in front of each message
        """
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is '<parent>:<child>'."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def is_enabled_for(self, level: LogLevel) -> bool:
        # Read on every call: .env is loaded after module-level loggers exist
        return level >= _get_log_level_from_env()

    def _format_message(self, level: str, message: str, color: str) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if not self.is_enabled_for(level):
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Detailed tracing; only shown with LOG_LEVEL=debug."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Something failed but the request carries on."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error, optionally with the exception that caused it.

        Args:
            message: The error message
            error: Exception whose type, message and (for reasoner
                failures) upstream payload are included
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
            payload = getattr(error, "payload", None)
            if payload is not None:
                data["payload"] = payload
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)
