"""Core configuration management utilities."""

from __future__ import annotations

import logging
import os

from pydantic import ValidationError

from ..constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE
from ..errors.internal import ConfigurationError
from .model import BotConfig
from .repository import ConfigRepository


def get_config_path() -> str:
    return os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)


def get_configuration(config_file: str | None = None) -> BotConfig:
    """Load and validate the bot configuration.

    Args:
        config_file: Path to the configuration file. Defaults to the path
            named by ``CHUCKBOT_CONF_FILE``.

    Returns:
        The validated BotConfig.

    Raises:
        ConfigurationError: If the file is unusable or a required field is
            missing or invalid.
    """
    path = config_file or get_config_path()
    raw = ConfigRepository(path).load_raw()
    try:
        config = BotConfig.from_dict(raw)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Bot is not configured: invalid or missing {', '.join(fields)} in {path}",
            data={"path": path, "fields": fields},
        ) from e
    logging.info(f"✅ Configuration loaded from {path}")
    return config


def normalize_token(token: str) -> str:
    return token if token.startswith("oauth:") else f"oauth:{token}"


def load_oauth_token(secrets_path: str) -> str:
    """Read the bot's OAuth token from a JSON secrets file.

    The file must contain ``{"token": "..."}``. The returned token always
    carries the ``oauth:`` prefix expected by the PASS command.

    Raises:
        ConfigurationError: If the file is unusable or the token is empty.
    """
    raw = ConfigRepository(secrets_path).load_raw()
    token = raw.get("token")
    if not isinstance(token, str) or not token.strip():
        raise ConfigurationError(
            f"Could not find 'token' in {secrets_path}", data={"path": secrets_path}
        )
    return normalize_token(token.strip())


def print_config_summary(config: BotConfig) -> None:
    """Log a summary of the loaded configuration (secrets excluded)."""
    logging.info("📋 Configuration summary")
    logging.info(f"👉 Bot: {config.bot_name}")
    logging.info(f"👉 Channel: #{config.channel}")
    tls = "TLS" if config.use_tls else "plaintext"
    logging.info(f"👉 Server: {config.server}:{config.port} ({tls})")
