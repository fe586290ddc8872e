"""
Process configuration loaded from Lambda environment variables.

Every required variable must be present at cold start; a missing one is a
deployment error, so ConfigurationError is never caught by the handlers.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60

# Field name -> environment variable
REQUIRED_ENV = {
    "github_org": "GITHUB_ORG",
    "github_client_id": "GITHUB_CLIENT_ID",
    "github_client_secret": "GITHUB_CLIENT_SECRET",
    "github_oauth_redirect_uri": "GITHUB_OAUTH_REDIRECT_URI",
    "authors_table_name": "AUTHORS_TABLE_NAME",
    "pages_table_name": "PAGES_TABLE_NAME",
    "session_secret": "SESSION_SECRET",
}


class ConfigurationError(ValueError):
    """Required configuration is absent or malformed."""


@dataclass(frozen=True)
class AppConfig:
    """Immutable settings shared by all handlers in a Lambda container."""

    github_org: str
    github_client_id: str
    github_client_secret: str
    github_oauth_redirect_uri: str
    authors_table_name: str
    pages_table_name: str
    session_secret: str
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"AppConfig(github_org={self.github_org!r}, "
            f"github_client_id={self.github_client_id!r}, "
            f"authors_table_name={self.authors_table_name!r}, "
            f"pages_table_name={self.pages_table_name!r})"
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build AppConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If any required variable is unset or empty, or
            SESSION_TTL_SECONDS is not a positive integer
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_ENV.values() if not env.get(name)]
    if missing:
        raise ConfigurationError(
            f"Required environment variables are not set: {', '.join(missing)}"
        )

    ttl_raw = env.get("SESSION_TTL_SECONDS")
    ttl = DEFAULT_SESSION_TTL_SECONDS
    if ttl_raw:
        try:
            ttl = int(ttl_raw)
        except ValueError:
            raise ConfigurationError("SESSION_TTL_SECONDS must be an integer") from None
        if ttl <= 0:
            raise ConfigurationError("SESSION_TTL_SECONDS must be positive")

    values = {field: env[name] for field, name in REQUIRED_ENV.items()}
    return AppConfig(session_ttl_seconds=ttl, **values)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load configuration once per container."""
    return load_config()


def reset_config() -> None:
    """Drop the cached configuration (for testing isolation)."""
    get_config.cache_clear()
