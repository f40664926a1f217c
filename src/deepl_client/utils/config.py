# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Configuration management for the DeepL client.

Handles the authentication key, endpoint selection and polling settings
using Pydantic Settings. Supports environment variables and .env files.
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loads configuration from environment variables or .env file.
    All settings can be overridden via environment variables with DEEPL_ prefix.

    Example .env file:
        DEEPL_AUTH_KEY=0123abcd-...
        DEEPL_USE_FREE_API=true
        DEEPL_POLL_INTERVAL=2.0

    Example usage:
        >>> settings = Settings()
        >>> settings.use_free_api
        False
    """

    auth_key: SecretStr | None = Field(
        default=None,
        description="DeepL API authentication key",
        json_schema_extra={"env": "DEEPL_AUTH_KEY"},
    )

    use_free_api: bool = Field(
        default=False,
        description="Use the free API endpoint (api-free.deepl.com)",
        json_schema_extra={"env": "DEEPL_USE_FREE_API"},
    )

    # Request Settings
    request_timeout: float = Field(
        default=30.0,
        description="Timeout for API requests (seconds)",
        gt=0,
        json_schema_extra={"env": "DEEPL_REQUEST_TIMEOUT"},
    )

    # Document polling
    poll_interval: float = Field(
        default=1.0,
        description="Wait between status polls when the server gives no estimate (seconds)",
        gt=0,
        json_schema_extra={"env": "DEEPL_POLL_INTERVAL"},
    )

    max_poll_interval: float | None = Field(
        default=None,
        description="Upper bound for a single wait between status polls (seconds, unset = no cap)",
        gt=0,
        json_schema_extra={"env": "DEEPL_MAX_POLL_INTERVAL"},
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        json_schema_extra={"env": "DEEPL_LOG_LEVEL"},
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEEPL_",
        case_sensitive=False,
        extra="ignore",
    )

    def get_auth_key(self) -> str:
        """Get the configured authentication key.

        Raises:
            ValueError: If no key is configured
        """
        if self.auth_key is None or not self.auth_key.get_secret_value():
            raise ValueError("DeepL authentication key not configured. Set DEEPL_AUTH_KEY")
        return self.auth_key.get_secret_value()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
