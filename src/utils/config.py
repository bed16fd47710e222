"""Configuration management for the Recipe Generator.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.0-flash (fast, good enough for single-recipe JSON)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        # Temperature: 0.4 keeps recipes varied while the JSON shape stays stable
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.4"))
        # Max Output Tokens: one recipe with six steps fits comfortably in 2048
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))
        # Number of recent recipes kept in a session history. Default: 5
        self.HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "5"))
        # Diet modifier used when the caller does not pass one ("none" or "any" disables it)
        self.DEFAULT_DIET_FILTER: str = os.getenv("DEFAULT_DIET_FILTER", "none")

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If the API key is missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.HISTORY_LIMIT < 1:
            raise ValueError(
                f"HISTORY_LIMIT must be at least 1, got: {self.HISTORY_LIMIT}"
            )


# Module-level config instance; validated when a live Gemini client is created
config = Config()
