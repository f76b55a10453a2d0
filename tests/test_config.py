"""
Tests for settings and environment loading.
"""

import pytest
from pydantic import ValidationError

from review_context.config import ReviewContextSettings

SETTINGS_FIELDS = [name.upper() for name in ReviewContextSettings.model_fields]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test without REVIEW_CONTEXT_* variables and outside any .env."""
    for name in SETTINGS_FIELDS:
        monkeypatch.delenv(f"REVIEW_CONTEXT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """Test default values and field constraints."""

    def test_defaults(self):
        """Unset variables fall back to the documented defaults."""
        settings = ReviewContextSettings()
        assert settings.chunk_token_budget == 1200
        assert settings.relevance_char_budget == 8000
        assert settings.hotspot_limit == 10
        assert settings.max_workers == 12
        assert settings.min_suggestion_chars == 12
        assert settings.duplicate_line_window == 1
        assert settings.fuzzy_enabled is False
        assert settings.fuzzy_min_confidence == 0.6

    def test_settings_are_frozen(self):
        """Settings cannot be changed after construction."""
        settings = ReviewContextSettings()
        with pytest.raises(ValidationError):
            settings.hotspot_limit = 3

    @pytest.mark.parametrize("field, value", [
        ("chunk_token_budget", 0),
        ("relevance_char_budget", -5),
        ("hotspot_limit", 0),
        ("fuzzy_min_confidence", 1.5),
        ("duplicate_line_window", -1),
    ])
    def test_out_of_range_values(self, field, value):
        """Non-positive budgets and out-of-range confidences are rejected."""
        with pytest.raises(ValidationError):
            ReviewContextSettings(**{field: value})


class TestFromEnv:
    """Test REVIEW_CONTEXT_* environment loading."""

    def test_reads_prefixed_variables(self, monkeypatch):
        """Prefixed variables override defaults; others are ignored."""
        monkeypatch.setenv("REVIEW_CONTEXT_CHUNK_TOKEN_BUDGET", "500")
        monkeypatch.setenv("REVIEW_CONTEXT_FUZZY_ENABLED", "true")
        monkeypatch.setenv("REVIEW_CONTEXT_FUZZY_ENHANCE", "0")
        monkeypatch.setenv("REVIEW_CONTEXT_FUZZY_MIN_CONFIDENCE", "0.7")
        monkeypatch.setenv("CHUNK_TOKEN_BUDGET", "1")

        settings = ReviewContextSettings.from_env()
        assert settings.chunk_token_budget == 500
        assert settings.fuzzy_enabled is True
        assert settings.fuzzy_enhance is False
        assert settings.fuzzy_min_confidence == 0.7
        assert settings.hotspot_limit == 10

    def test_empty_environment_gives_defaults(self):
        """Without variables the loaded settings equal the defaults."""
        assert ReviewContextSettings.from_env() == ReviewContextSettings()

    def test_malformed_boolean(self, monkeypatch):
        """A misspelt boolean is an error, not a silent False."""
        monkeypatch.setenv("REVIEW_CONTEXT_FUZZY_ENABLED", "ture")
        with pytest.raises(ValidationError):
            ReviewContextSettings.from_env()

    def test_malformed_integer(self, monkeypatch):
        """A non-numeric integer value is an error."""
        monkeypatch.setenv("REVIEW_CONTEXT_HOTSPOT_LIMIT", "many")
        with pytest.raises(ValidationError):
            ReviewContextSettings.from_env()

    def test_out_of_range_value(self, monkeypatch):
        """Environment values go through the same constraints as arguments."""
        monkeypatch.setenv("REVIEW_CONTEXT_MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            ReviewContextSettings.from_env()

    def test_dotenv_file(self, tmp_path):
        """An explicit dotenv file supplies values."""
        env_file = tmp_path / "review.env"
        env_file.write_text("REVIEW_CONTEXT_HOTSPOT_LIMIT=4\n")
        assert ReviewContextSettings.from_env(env_file=str(env_file)).hotspot_limit == 4

    def test_default_dotenv_in_working_directory(self, tmp_path):
        """A .env file in the working directory is picked up by default."""
        (tmp_path / ".env").write_text("REVIEW_CONTEXT_MIN_SUGGESTION_CHARS=20\n")
        assert ReviewContextSettings().min_suggestion_chars == 20

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        """Variables already set take precedence over the dotenv file."""
        monkeypatch.setenv("REVIEW_CONTEXT_HOTSPOT_LIMIT", "7")
        env_file = tmp_path / "review.env"
        env_file.write_text("REVIEW_CONTEXT_HOTSPOT_LIMIT=4\n")
        assert ReviewContextSettings.from_env(env_file=str(env_file)).hotspot_limit == 7

    def test_malformed_value_in_dotenv(self, tmp_path):
        """Values read from a dotenv file are validated too."""
        env_file = tmp_path / "review.env"
        env_file.write_text("REVIEW_CONTEXT_FUZZY_ENHANCE=maybe\n")
        with pytest.raises(ValidationError):
            ReviewContextSettings.from_env(env_file=str(env_file))
