"""Tests for environment configuration."""

import pytest

from src.utils.config import (
    DEFAULT_SESSION_TTL_SECONDS,
    REQUIRED_ENV,
    ConfigurationError,
    get_config,
    load_config,
    reset_config,
)

FULL_ENV = {
    "GITHUB_ORG": "org",
    "GITHUB_CLIENT_ID": "id",
    "GITHUB_CLIENT_SECRET": "secret",
    "GITHUB_OAUTH_REDIRECT_URI": "https://example.com/cb",
    "AUTHORS_TABLE_NAME": "authors",
    "PAGES_TABLE_NAME": "pages",
    "SESSION_SECRET": "s3cret",
}


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_all_fields(self) -> None:
        config = load_config(FULL_ENV)

        assert config.github_org == "org"
        assert config.pages_table_name == "pages"
        assert config.session_ttl_seconds == DEFAULT_SESSION_TTL_SECONDS

    @pytest.mark.parametrize("name", sorted(REQUIRED_ENV.values()))
    def test_each_variable_is_required(self, name: str) -> None:
        env = {k: v for k, v in FULL_ENV.items() if k != name}

        with pytest.raises(ConfigurationError, match=name):
            load_config(env)

    def test_reports_all_missing(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config({})

        for name in REQUIRED_ENV.values():
            assert name in str(exc_info.value)

    def test_empty_value_counts_as_missing(self) -> None:
        with pytest.raises(ConfigurationError, match="SESSION_SECRET"):
            load_config({**FULL_ENV, "SESSION_SECRET": ""})

    def test_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            load_config({})

    def test_session_ttl_override(self) -> None:
        assert load_config({**FULL_ENV, "SESSION_TTL_SECONDS": "60"}).session_ttl_seconds == 60

    @pytest.mark.parametrize("value", ["soon", "0", "-5"])
    def test_bad_session_ttl(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="SESSION_TTL_SECONDS"):
            load_config({**FULL_ENV, "SESSION_TTL_SECONDS": value})

    def test_repr_hides_secrets(self) -> None:
        text = repr(load_config(FULL_ENV))

        assert "s3cret" not in text
        assert "secret'" not in text


class TestGetConfig:
    """Tests for the cached accessor."""

    def test_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_config()
        monkeypatch.setenv("GITHUB_ORG", "other-org")

        assert get_config() is first
        reset_config()
        assert get_config().github_org == "other-org"

    def test_missing_env_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SESSION_SECRET")
        reset_config()

        with pytest.raises(ConfigurationError):
            get_config()
