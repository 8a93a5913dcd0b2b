import math
import os
from typing import Union

from dotenv import load_dotenv

# Load .env file variables into environment
load_dotenv()

UNLIMITED_VALUES = ("inf", "infinity", "unlimited")


class Settings:
    """Emitter configuration settings loaded from environment variables."""

    # --- Emitter Settings ---
    def get_max_listeners(self, default: Union[int, float] = 10) -> Union[int, float]:
        """Returns the default maximum number of listeners per event.

        "inf", "infinity" or "unlimited" disable the overflow warning entirely.
        Raises ValueError unless the value is a positive integer or one of those words.
        """
        value = os.getenv("EMITKIT_MAX_LISTENERS")
        if value is None or not value.strip():
            return default
        if value.strip().lower() in UNLIMITED_VALUES:
            return math.inf
        try:
            count = int(value)
        except ValueError:
            raise ValueError("EMITKIT_MAX_LISTENERS environment variable must be an integer or 'unlimited'.")
        if count < 1:
            raise ValueError(f"EMITKIT_MAX_LISTENERS environment variable must be at least 1, got {count}.")
        return count

    # --- Logging Settings ---
    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()
