"""Settings for review context assembly and comment verification."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "REVIEW_CONTEXT_"

DEFAULT_CHUNK_TOKEN_BUDGET = 1200
DEFAULT_RELEVANCE_CHAR_BUDGET = 8000
DEFAULT_HOTSPOT_LIMIT = 10
DEFAULT_MAX_WORKERS = 12
DEFAULT_MIN_SUGGESTION_CHARS = 12
DEFAULT_DUPLICATE_LINE_WINDOW = 1
DEFAULT_MIN_CONFIDENCE = 0.6
DEFAULT_MAX_CONTEXT_MATCHES = 5


class ReviewContextSettings(BaseSettings):
    """All tunables of the diff, graph and verification stages.

    Values come from keyword arguments, then ``REVIEW_CONTEXT_*``
    environment variables, then a ``.env`` file, then the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    chunk_token_budget: int = Field(default=DEFAULT_CHUNK_TOKEN_BUDGET, gt=0)
    relevance_char_budget: int = Field(default=DEFAULT_RELEVANCE_CHAR_BUDGET, gt=0)
    hotspot_limit: int = Field(default=DEFAULT_HOTSPOT_LIMIT, gt=0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, gt=0)
    min_suggestion_chars: int = Field(default=DEFAULT_MIN_SUGGESTION_CHARS, ge=0)
    duplicate_line_window: int = Field(default=DEFAULT_DUPLICATE_LINE_WINDOW, ge=0)
    fuzzy_enabled: bool = False
    fuzzy_enhance: bool = False
    fuzzy_min_confidence: float = Field(default=DEFAULT_MIN_CONFIDENCE, gt=0.0, le=1.0)
    fuzzy_max_context_matches: int = Field(default=DEFAULT_MAX_CONTEXT_MATCHES, gt=0)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ReviewContextSettings":
        """Build settings from the environment, optionally with an explicit dotenv file.

        Variables that are already set win over values in the file.

        Raises:
            pydantic.ValidationError: If a value is malformed or out of range.
        """
        if env_file is None:
            return cls()
        return cls(_env_file=env_file)
