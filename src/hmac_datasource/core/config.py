"""
Configuration module for the HMAC sensor datasource.

Loads configuration from a JSON file (or a dict) and environment variables.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants
from ..exceptions import ConfigurationError
from ..models.settings import PluginSettings, SecretSettings

# Environment variable -> dotted configuration key
ENV_OVERRIDES = {
    "HMAC_SERVER_URL": "datasource.server_url",
    "HMAC_BASE_PATH": "datasource.base_path",
    "HMAC_AUTH_METHOD": "datasource.auth_method",
    "HMAC_CLIENT_ID": "secrets.client_id",
    "HMAC_SECRET_KEY": "secrets.secret_key",
    "LOG_LEVEL": "logging.level",
    "LOG_FILE": "logging.file",
}


class Config:
    """Configuration manager for the datasource."""

    def __init__(self, config_file: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'
            data: Configuration dictionary; when given, no file is read
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = {}
        if data is not None:
            self.config_file = None
            self.config = json.loads(json.dumps(data))
        else:
            self._load_config()
        self._override_from_env()
        self._validate_config()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build configuration from a dictionary instead of a file."""
        return cls(data=data)

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                self.config = json.load(f)
            except ValueError as e:
                raise ConfigurationError(f"Invalid configuration file {self.config_file}: {e}") from e

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if not value:
                continue
            section, name = key.split(".")
            self.config.setdefault(section, {})[name] = value

    def _validate_config(self) -> None:
        """
        Validate the configuration structure.

        Empty credential or endpoint values are allowed here; they are
        reported by the health check and refused when a request is made.
        """
        if not isinstance(self.config, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        if "datasource" not in self.config:
            raise ConfigurationError("Missing required configuration sections: datasource")

        for section in ("datasource", "secrets", "api", "logging"):
            if section in self.config and not isinstance(self.config[section], dict):
                raise ConfigurationError(f"Configuration section '{section}' must be an object")

        for key in ("timeout", "max_retries", "pool_maxsize"):
            value = self.get(f"api.{key}")
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0):
                raise ConfigurationError(f"Invalid configuration value api.{key}: {value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'datasource.server_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def server_url(self) -> str:
        return self.get("datasource.server_url", "")

    @property
    def base_path(self) -> str:
        return self.get("datasource.base_path", "")

    @property
    def auth_method(self) -> str:
        """Scheme name placed before the credentials in the Authorization header."""
        return self.get("datasource.auth_method", "")

    @property
    def client_id(self) -> str:
        return self.get("secrets.client_id", "")

    @property
    def secret_key(self) -> str:
        return self.get("secrets.secret_key", "")

    @property
    def api_timeout(self) -> float:
        """Get API timeout in seconds."""
        return self.get("api.timeout", constants.DEFAULT_TIMEOUT)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts (0 disables retries)."""
        return int(self.get("api.max_retries", constants.DEFAULT_MAX_RETRIES))

    @property
    def api_pool_maxsize(self) -> int:
        """Get the number of pooled connections per host."""
        return int(self.get("api.pool_maxsize", constants.DEFAULT_POOL_MAXSIZE))

    @property
    def api_verify_ssl(self) -> bool:
        """Get API SSL verification setting."""
        return self.get("api.verify_ssl", True)

    @property
    def log_level(self) -> str:
        return self.get("logging.level", "INFO")

    @property
    def log_file(self) -> str:
        return self.get("logging.file", "")

    def to_settings(self) -> PluginSettings:
        """Build the immutable datasource settings."""
        return PluginSettings(
            server_url=self.server_url,
            base_path=self.base_path,
            auth_method=self.auth_method,
            secrets=SecretSettings(
                secret_key=self.secret_key,
                client_id=self.client_id,
            ),
        )

    def __repr__(self) -> str:
        """String representation of config (never includes secrets)."""
        return f"Config(file={self.config_file}, server={self.server_url}, base_path={self.base_path})"
