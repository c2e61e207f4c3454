"""Chuck Norris fact bot for Twitch chat."""

__version__ = "1.0.0"
