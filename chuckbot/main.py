#!/usr/bin/env python3
"""
Main entry point for the Chuck Norris chat bot
"""

import asyncio
import logging
import sys

import aiohttp

from .api.facts import FactClient
from .bot.session import Session
from .config import (
    get_config_path,
    get_configuration,
    load_oauth_token,
    print_config_summary,
)
from .errors.handling import log_error
from .errors.internal import ConfigurationError
from .logging_config import LoggerConfigurator


def emit_config_instructions(config_file: str) -> None:
    logging.info(f"📄 Create {config_file} (or point CHUCKBOT_CONF_FILE at a file) containing:")
    logging.info(
        '👉 {"bot_name": "...", "channel": "...", "server": "irc.chat.twitch.tv", '
        '"port": 6697, "secrets_path": "./secrets.json"}'
    )
    logging.info('👉 and a secrets file containing {"token": "<oauth token>"}')


async def main() -> int:
    """Load configuration and run the bot session until it ends.

    Returns:
        Process exit code: 0 when the session ended (including a rejected
        login), 1 on a configuration error.
    """
    config_file = get_config_path()
    try:
        config = get_configuration(config_file)
        token = load_oauth_token(config.secrets_path)
    except ConfigurationError as e:
        log_error("Configuration error", e)
        emit_config_instructions(config_file)
        return 1

    print_config_summary(config)
    logging.info(f"🚀 Starting bot {config.bot_name}")
    async with aiohttp.ClientSession() as http:
        facts = FactClient(http)
        session = Session(config, token, facts.fetch_fact)
        await session.run()
    return 0


def health_check() -> int:
    logging.info("🏥 Health check mode")
    try:
        config = get_configuration()
        load_oauth_token(config.secrets_path)
    except ConfigurationError as e:
        logging.error(f"❌ Health check failed: {e}")
        return 1
    logging.info(f"✅ Health check passed - {config.bot_name} in #{config.channel}")
    return 0


def run() -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: Always, carrying the process exit code.
    """
    LoggerConfigurator().configure()
    if len(sys.argv) > 1 and sys.argv[1] == "--health-check":
        sys.exit(health_check())
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        logging.warning("⌨️ Interrupted by user")
        code = 0
    except Exception as e:
        log_error("Top-level error", e)
        code = 1
    finally:
        logging.info("✅ Application shutdown complete")
    sys.exit(code)


if __name__ == "__main__":
    run()
