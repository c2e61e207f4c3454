from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_GREETING = "Hello everyone! Type `!chucknorris` to get some Chuck Norris facts!"
DEFAULT_WHISPER_AUTO_RESPONSE = (
    "Blue Fairy? Please. Please, please make me into a real, live boy. Please. "
    "Blue Fairy? Please. Please. Make me real. Blue Fairy, please. Please make me real. "
    "Please make me a real boy. Please, Blue Fairy. Make me into a real boy. Please."
)


class BotConfig(BaseModel):
    """Startup configuration for one bot run.

    Attributes:
        bot_name: Login / display name of the bot account.
        channel: Channel to join, stored without the leading '#'.
        server: Chat server host.
        port: Chat server port.
        secrets_path: Path to the JSON file holding the OAuth token.
        use_tls: Whether the transport is wrapped in TLS.
        greeting: Line sent to the channel after every (re)join.
        whisper_auto_response: Reply sent to every whisper.
    """

    bot_name: str = Field(min_length=1, max_length=25)
    channel: str = Field(min_length=1)
    server: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    secrets_path: str = Field(min_length=1)
    use_tls: bool = True
    greeting: str = DEFAULT_GREETING
    whisper_auto_response: str = DEFAULT_WHISPER_AUTO_RESPONSE

    @field_validator("bot_name", "server", "secrets_path", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("server")
    @classmethod
    def check_host(cls, v: str) -> str:
        """Reject host names the resolver cannot encode (e.g. empty labels)."""
        if any(c.isspace() for c in v):
            raise ValueError("host name must not contain whitespace")
        try:
            v.encode("idna")
        except UnicodeError as e:
            raise ValueError(f"invalid host name: {e}") from e
        return v

    @field_validator("channel", mode="before")
    @classmethod
    def normalize_channel(cls, v: Any) -> Any:
        """Strip whitespace and the leading '#', lower-case the name."""
        if isinstance(v, str):
            return v.strip().lstrip("#").lower()
        return v

    @field_validator("greeting", "whisper_auto_response", mode="before")
    @classmethod
    def default_when_blank(cls, v: Any, info) -> Any:  # type: ignore[no-untyped-def]
        # Blank optional texts fall back to the built-in defaults.
        if v is None or (isinstance(v, str) and not v.strip()):
            return (
                DEFAULT_GREETING
                if info.field_name == "greeting"
                else DEFAULT_WHISPER_AUTO_RESPONSE
            )
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BotConfig:
        """Create BotConfig from a dictionary.

        Args:
            data: Dictionary containing configuration data.

        Returns:
            BotConfig instance.
        """
        return cls.model_validate(dict(data))
