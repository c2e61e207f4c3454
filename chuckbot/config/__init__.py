"""Configuration package exports."""

from .core import (  # noqa: F401
    get_config_path,
    get_configuration,
    load_oauth_token,
    normalize_token,
    print_config_summary,
)
from .model import BotConfig
from .repository import ConfigRepository

__all__ = [
    "BotConfig",
    "ConfigRepository",
    "get_config_path",
    "get_configuration",
    "load_oauth_token",
    "normalize_token",
    "print_config_summary",
]
