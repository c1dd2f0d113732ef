"""
Bot configuration, read once at startup from the environment (.env supported).
"""

import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

_LOGGER = logging.getLogger(__name__)

DEFAULT_BOT_NAME = "WhatsApp Bot"
DEFAULT_AUTH_DIR = "auth_info"
DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
DEFAULT_GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"


class ConfigError(Exception):
    """Raised when required configuration is missing."""


@dataclass(frozen=True)
class BotConfig:
    groq_api_key: str
    bot_name: str = DEFAULT_BOT_NAME
    auth_dir: str = DEFAULT_AUTH_DIR
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_api_url: str = DEFAULT_GROQ_API_URL


def load_config(env_file=None):
    """
    Build the bot configuration from environment variables.

    :param env_file: Optional path to a .env file (default: search from cwd)
    :return: BotConfig
    :raises ConfigError: if GROQ_API_KEY is not set
    """
    load_dotenv(env_file)

    api_key = os.getenv("GROQ_API_KEY")
    if not api_key:
        raise ConfigError(
            "GROQ_API_KEY not found. Add GROQ_API_KEY=your_groq_api_key_here to your .env file "
            "(keys are available at https://console.groq.com/keys)"
        )

    config = BotConfig(
        groq_api_key=api_key,
        bot_name=os.getenv("BOT_NAME", DEFAULT_BOT_NAME),
        auth_dir=os.getenv("AUTH_DIR", DEFAULT_AUTH_DIR),
        groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        groq_api_url=os.getenv("GROQ_API_URL", DEFAULT_GROQ_API_URL),
    )
    _LOGGER.info(f"Loaded configuration for {config.bot_name} (auth dir: {config.auth_dir})")
    return config
