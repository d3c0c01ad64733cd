"""Logging utilities for the user input panel.

This module provides TUI-aware logging capabilities including a custom handler
that captures log messages for display in the debug panel of the terminal UI.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from userinput.constants import DEBUG_LOG_FILE_NAME, MAX_LOG_MESSAGES

APP_LOGGER_NAME = "userinput"


class TUILogHandler(logging.Handler):
    """Custom logging handler that captures messages for TUI display."""

    def __init__(self, max_messages: int = MAX_LOG_MESSAGES) -> None:
        """Initialize the TUI log handler.

        Parameters
        ----------
        max_messages : int, optional
            Number of formatted messages kept before the oldest is dropped

        """
        super().__init__()
        self.messages: list[str] = []
        self.max_messages = max_messages

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record by storing it for TUI display.

        Parameters
        ----------
        record : logging.LogRecord
            The log record to emit

        """
        try:
            msg = self.format(record)
            self.messages.append(msg)
            if len(self.messages) > self.max_messages:
                self.messages.pop(0)
        except Exception:
            self.handleError(record)

    def get_messages(self) -> list[str]:
        """Get all captured log messages.

        Returns
        -------
        list[str]
            A copy of all captured log messages

        """
        return self.messages.copy()

    def clear_messages(self) -> None:
        """Clear all captured messages."""
        self.messages.clear()


# Global TUI log handler for debug output
tui_log_handler = TUILogHandler()


def debug_log_path() -> Path:
    """Return the location of the debug log file."""
    return Path(tempfile.gettempdir()) / DEBUG_LOG_FILE_NAME


def setup_logging(debug_mode: bool = False) -> None:
    """Set up logging configuration based on debug mode.

    The application logger always feeds the TUI handler. In debug mode the
    log file receives everything, otherwise only warnings and errors.

    Parameters
    ----------
    debug_mode : bool, optional
        Whether to enable debug level logging, by default False

    """
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        if handler is not tui_log_handler:
            handler.close()

    level = logging.DEBUG if debug_mode else logging.INFO
    app_logger.setLevel(level)
    app_logger.propagate = True

    tui_log_handler.setLevel(level)
    app_logger.addHandler(tui_log_handler)

    file_handler = logging.FileHandler(debug_log_path())
    file_handler.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    app_logger.addHandler(file_handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    for handler in app_logger.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Parameters
    ----------
    name : str
        The name for the logger

    Returns
    -------
    logging.Logger
        Logger instance

    """
    return logging.getLogger(name)
