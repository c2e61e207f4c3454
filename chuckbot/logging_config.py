r"""
Logging configuration module for the Chuck Norris chat bot.

Provides a clean, configurable logging setup using the colorlog library,
structured error logging, and a helper to highlight a token inside a line.
"""

import logging
import os
import sys
from typing import Any

import colorlog
from colorlog.escape_codes import escape_codes

LOG_COLORS = {
    "DEBUG": "light_black",
    "INFO": "white",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def highlight(text: str, token: str, color: str = "green") -> str:
    """Return ``text`` with every occurrence of ``token`` wrapped in a color.

    Args:
        text: The full log line.
        token: Substring to emphasise (e.g. a chat command like ``!chucknorris``).
        color: Any colorlog escape code name.

    Returns:
        The text with ANSI color codes around each occurrence of the token.
    """
    if not token:
        return text
    return text.replace(token, f"{escape_codes[color]}{token}{escape_codes['reset']}")


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context.

    Args:
        error_type: Category of the error (e.g., 'network', 'auth', 'config')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional config dict; ``level`` overrides the DEBUG env lookup.
        """
        self.config = config or {}

    def resolve_level(self) -> int:
        if "level" in self.config:
            return self.config["level"]
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s.%(msecs)03d %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "DEBUG": "light_black",
                    "ERROR": "red",
                    "CRITICAL": "red",
                }
            },
            reset=True,
        )

    def configure(self):
        """Configure logging with colored output using colorlog.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO.
          Raw protocol lines are logged at DEBUG, so they only show up then.
        """
        log_level = self.resolve_level()
        formatter = self.build_formatter()

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        logging.basicConfig(
            level=log_level,
            handlers=[handler],
            format="%(message)s",
            force=True,
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # aiohttp and asyncio are chatty at DEBUG
        logging.getLogger("aiohttp").setLevel(logging.INFO)
        logging.getLogger("asyncio").setLevel(logging.INFO)
