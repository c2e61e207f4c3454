"""
Configuration constants for the Chuck Norris chat bot

This module contains all tunable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Chat protocol
IRC_MAX_LINE_BYTES = _get_env_int(
    "IRC_MAX_LINE_BYTES", 512
)  # Hard protocol ceiling, terminator included
ASYNC_IRC_CONNECT_TIMEOUT = _get_env_float(
    "ASYNC_IRC_CONNECT_TIMEOUT", 15.0
)  # Per-attempt connect timeout
IRC_READ_LIMIT_BYTES = _get_env_int(
    "IRC_READ_LIMIT_BYTES", 65536
)  # Inbound lines longer than this are skipped

# Reconnect backoff
RECONNECT_BASE_DELAY = _get_env_float(
    "RECONNECT_BASE_DELAY", 1.0
)  # Wait after the first failed attempt of a cycle
RECONNECT_MAX_DELAY = _get_env_float(
    "RECONNECT_MAX_DELAY", 0.0
)  # 0 disables the ceiling

# Outbound chat rate limit (20 messages per 30 seconds)
CHAT_RATE_LIMIT_MESSAGES = _get_env_int("CHAT_RATE_LIMIT_MESSAGES", 20)
CHAT_RATE_LIMIT_WINDOW_SECONDS = _get_env_float("CHAT_RATE_LIMIT_WINDOW_SECONDS", 30.0)
CHAT_SEND_INTERVAL_SECONDS = CHAT_RATE_LIMIT_WINDOW_SECONDS / max(
    CHAT_RATE_LIMIT_MESSAGES, 1
)
OUTBOUND_QUEUE_CAPACITY = _get_env_int(
    "OUTBOUND_QUEUE_CAPACITY", 10
)  # Pending outbound lines before new ones are dropped

# Fact API
FACT_API_URL = os.getenv("FACT_API_URL", "https://api.chucknorris.io/jokes/random")
FACT_FETCH_TIMEOUT = _get_env_float(
    "FACT_FETCH_TIMEOUT", 5.0
)  # Total timeout for one fact request

# Configuration
DEFAULT_CONFIG_FILE = "chuckbot.conf"
CONFIG_FILE_ENV = "CHUCKBOT_CONF_FILE"
