"""
Unit Tests for Configuration Loading

Tests for load_config() and its environment handling.
"""

import pytest

from page_render.config import DEFAULT_CRITICAL_CSS_LIMIT, DEFAULT_RELATED_TIMEOUT, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("API_BASE", "API_TOKEN", "CRITICAL_CSS_LIMIT", "RELATED_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_when_environment_empty_then_defaults(self):
        """Unset variables keep the built-in defaults."""
        config = load_config()
        assert config.critical_css_limit == DEFAULT_CRITICAL_CSS_LIMIT
        assert config.related_timeout == DEFAULT_RELATED_TIMEOUT
        assert config.api_base is None
        assert config.api_token is None

    def test_load_when_values_set_then_parsed(self, monkeypatch):
        """Numbers and API settings are read from the environment."""
        monkeypatch.setenv("CRITICAL_CSS_LIMIT", "2500")
        monkeypatch.setenv("RELATED_TIMEOUT", "1.5")
        monkeypatch.setenv("API_BASE", "https://api.example.com")
        monkeypatch.setenv("API_TOKEN", "secret")

        config = load_config()

        assert config.critical_css_limit == 2500
        assert config.related_timeout == 1.5
        assert config.api_base == "https://api.example.com"
        assert config.api_token == "secret"

    @pytest.mark.parametrize("raw", ["lots", "0", "-10"])
    def test_load_when_limit_invalid_then_default_and_warning(self, monkeypatch, caplog, raw):
        """Bad numbers are logged and replaced by the default."""
        monkeypatch.setenv("CRITICAL_CSS_LIMIT", raw)

        config = load_config()

        assert config.critical_css_limit == DEFAULT_CRITICAL_CSS_LIMIT
        assert "CRITICAL_CSS_LIMIT" in caplog.text
