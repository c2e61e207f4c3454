from __future__ import annotations

import json
import logging
import os
from typing import Any

from ..errors.internal import ConfigurationError


class ConfigRepository:
    """Repository for the JSON configuration and secrets files.

    Both files hold a single JSON object. Anything else is reported as a
    ``ConfigurationError`` naming the offending path.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """Initialize the ConfigRepository.

        Args:
            path: Path to the JSON file.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)

    def load_raw(self) -> dict[str, Any]:
        """Load the JSON object stored in the file.

        Returns:
            The decoded object.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not valid
                JSON, or does not contain an object.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {self.path}", data={"path": self.path}
            ) from e
        except (OSError, ValueError) as e:
            logging.error(f"Configuration load error: {e}")
            raise ConfigurationError(
                f"Could not read {self.path}: {e}", data={"path": self.path}
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a JSON object in {self.path}", data={"path": self.path}
            )
        return data
