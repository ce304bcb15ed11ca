"""
Datasource settings models.

Contains the endpoint configuration and the secret credentials supplied once
per datasource instance.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class SecretSettings:
    """Secret credentials. Neither field is ever shown in repr or logs."""

    secret_key: str = field(default="", repr=False)
    client_id: str = field(default="", repr=False)


@dataclass(frozen=True)
class PluginSettings:
    """Plaintext datasource settings plus the secret credentials."""

    server_url: str = ""
    base_path: str = ""
    auth_method: str = ""
    secrets: SecretSettings = field(default_factory=SecretSettings)

    @classmethod
    def from_instance_settings(
        cls,
        json_data: Optional[Union[str, bytes, Dict[str, Any]]],
        secure_json_data: Optional[Dict[str, str]] = None
    ) -> "PluginSettings":
        """
        Build settings from the host's plaintext and decrypted secure data.

        Args:
            json_data: Plaintext settings with serverUrl, basePath and authMethod
                       (a dict or its JSON text)
            secure_json_data: Decrypted secrets with secretKey and clientId

        Returns:
            PluginSettings instance
        """
        if isinstance(json_data, (str, bytes)):
            try:
                json_data = json.loads(json_data)
            except ValueError as e:
                raise ConfigurationError(f"could not unmarshal plugin settings json: {e}") from e
        json_data = json_data or {}
        if not isinstance(json_data, dict):
            raise ConfigurationError("could not load plugin settings: expected a JSON object")
        secure_json_data = secure_json_data or {}

        return cls(
            server_url=json_data.get("serverUrl") or "",
            base_path=json_data.get("basePath") or "",
            auth_method=json_data.get("authMethod") or "",
            secrets=SecretSettings(
                secret_key=secure_json_data.get("secretKey") or "",
                client_id=secure_json_data.get("clientId") or "",
            ),
        )

    def required_fields(self) -> Tuple[Tuple[str, str], ...]:
        """Required settings as (label, value) pairs, in validation order."""
        return (
            ("HMAC signing key", self.secrets.secret_key),
            ("Client ID", self.secrets.client_id),
            ("Server URL", self.server_url),
            ("BasePath", self.base_path),
            ("AuthMethod", self.auth_method),
        )

    def first_missing(self) -> Optional[str]:
        """Label of the first empty required setting, or None if complete."""
        for label, value in self.required_fields():
            if not value:
                return label
        return None
