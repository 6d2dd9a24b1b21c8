"""Configuration loader for the Podcast Tracker CLI

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. PODCAST_TRACKER_ENV_FILE, or .env.local then .env in the working directory
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from podcast_auth.constants import (
    CALLBACK_TIMEOUT_SECONDS,
    DEFAULT_API_URL,
    DEFAULT_COGNITO_CLIENT_ID,
    DEFAULT_COGNITO_DOMAIN,
    DEFAULT_COGNITO_LOGOUT_URI,
    DEFAULT_COGNITO_REDIRECT_URI,
    DEFAULT_IDENTITY_PROVIDER,
    DEFAULT_OAUTH_SCOPES,
)
from podcast_auth.exceptions import ConfigurationError

# Set up logger for config loader
logger = logging.getLogger(__name__)

ENV_FILE_VAR = "PODCAST_TRACKER_ENV_FILE"
DEFAULT_ENV_FILES = (".env.local", ".env")


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to a .env file. Defaults to
                     $PODCAST_TRACKER_ENV_FILE, else .env.local and .env in
                     the current directory.
        """
        self.env_paths = self._resolve_env_paths(env_path)
        self._load_env_files()

    @staticmethod
    def _resolve_env_paths(env_path: Optional[str]) -> List[Path]:
        explicit = env_path or optional(os.getenv(ENV_FILE_VAR))
        if explicit:
            return [Path(explicit).expanduser().resolve()]
        return [Path.cwd() / name for name in DEFAULT_ENV_FILES]

    def _load_env_files(self):
        """Load environment variables from .env files that exist

        Earlier files win; real environment variables are never overridden.
        """
        for path in self.env_paths:
            if path.exists():
                load_dotenv(dotenv_path=path, override=False)
                logger.debug(f"Loaded environment variables from {path}")
            else:
                logger.debug(f"{path} not found, skipping")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        Args:
            env_var: Environment variable name to check
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_value = optional(os.getenv(env_var))
        if env_value is not None:
            # Try to parse as appropriate type
            if isinstance(default, bool):
                return env_value.lower() in ('true', '1', 'yes')
            elif isinstance(default, int):
                try:
                    return int(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                    return default
            elif isinstance(default, float):
                try:
                    return float(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                    return default
            if isinstance(default, str) and env_value.startswith("~/"):
                return str(Path(env_value).expanduser())
            return env_value

        # Expand home directory if it's a path
        if isinstance(default, str) and default.startswith("~/"):
            return str(Path(default).expanduser())
        return default

    def get_first(self, *env_vars: str) -> Optional[str]:
        """Return the first non-blank value among several variable names"""
        for env_var in env_vars:
            value = optional(os.getenv(env_var))
            if value is not None:
                return value
        return None


def optional(value: Optional[str]) -> Optional[str]:
    """Trim a raw value; blank becomes None"""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def ensure_http_url(value: str, key: str) -> str:
    """Validate an http(s) URL and drop a trailing slash

    Raises:
        ConfigurationError: If the value is not an absolute http(s) URL
    """
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(f"{key} must start with http:// or https://")
    if not parsed.netloc:
        raise ConfigurationError(f"{key} must be an absolute URL")
    return value.rstrip("/")


def derive_cognito_domain(loader: ConfigLoader) -> Optional[str]:
    """Explicit domain, else https://<prefix>.auth.<region>.amazoncognito.com"""
    explicit = loader.get_first("PODCAST_TRACKER_COGNITO_DOMAIN", "PUBLIC_COGNITO_DOMAIN")
    if explicit:
        return explicit

    prefix = loader.get_first("COGNITO_DOMAIN_PREFIX")
    pool_id = loader.get_first("COGNITO_USER_POOL_ID")
    if not prefix or not pool_id:
        return None

    region = pool_id.split("_")[0]
    if not region:
        return None

    return f"https://{prefix}.auth.{region}.amazoncognito.com"


@dataclass(frozen=True)
class CliConfig:
    """Resolved CLI configuration"""
    cognito_domain: str
    cognito_client_id: str
    cognito_redirect_uri: str
    cognito_logout_uri: str
    oauth_scopes: str
    identity_provider: str
    session_file: str
    callback_timeout: float = CALLBACK_TIMEOUT_SECONDS
    http_timeout: float = 30.0
    cognito_configured: bool = True
    api_url: str = DEFAULT_API_URL


def load_cli_config(loader: Optional[ConfigLoader] = None) -> CliConfig:
    """Build the CLI configuration from environment and .env files

    Raises:
        ConfigurationError: If a configured URL is malformed
    """
    loader = loader or get_config_loader()

    cognito_domain = ensure_http_url(
        derive_cognito_domain(loader) or DEFAULT_COGNITO_DOMAIN,
        "PODCAST_TRACKER_COGNITO_DOMAIN",
    )
    cognito_client_id = (
        loader.get_first("PODCAST_TRACKER_COGNITO_CLIENT_ID", "PUBLIC_COGNITO_CLIENT_ID")
        or DEFAULT_COGNITO_CLIENT_ID
    )
    cognito_redirect_uri = ensure_http_url(
        loader.get("PODCAST_TRACKER_COGNITO_REDIRECT_URI", DEFAULT_COGNITO_REDIRECT_URI),
        "PODCAST_TRACKER_COGNITO_REDIRECT_URI",
    )
    cognito_logout_uri = ensure_http_url(
        loader.get("PODCAST_TRACKER_COGNITO_LOGOUT_URI", DEFAULT_COGNITO_LOGOUT_URI),
        "PODCAST_TRACKER_COGNITO_LOGOUT_URI",
    )
    api_url = ensure_http_url(
        loader.get_first("PODCAST_TRACKER_APPSYNC_URL", "PUBLIC_APPSYNC_URL") or DEFAULT_API_URL,
        "PODCAST_TRACKER_APPSYNC_URL",
    )

    return CliConfig(
        cognito_domain=cognito_domain,
        cognito_client_id=cognito_client_id,
        cognito_redirect_uri=cognito_redirect_uri,
        cognito_logout_uri=cognito_logout_uri,
        oauth_scopes=loader.get("PODCAST_TRACKER_OAUTH_SCOPES", DEFAULT_OAUTH_SCOPES),
        identity_provider=loader.get("PODCAST_TRACKER_IDENTITY_PROVIDER", DEFAULT_IDENTITY_PROVIDER),
        session_file=loader.get("PODCAST_TRACKER_SESSION_FILE", "~/.podcast-tracker/session.json"),
        callback_timeout=loader.get("PODCAST_TRACKER_CALLBACK_TIMEOUT", CALLBACK_TIMEOUT_SECONDS),
        http_timeout=loader.get("PODCAST_TRACKER_HTTP_TIMEOUT", 30.0),
        cognito_configured=bool(cognito_domain and cognito_client_id),
        api_url=api_url,
    )


# Create a global instance
_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reset_config_loader() -> None:
    """Forget the global loader so the next call re-reads .env files"""
    global _config_loader
    _config_loader = None
