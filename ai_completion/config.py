# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
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

"""Completion settings.

Settings are read from (highest priority first) constructor arguments,
``AI_COMPLETION_*`` environment variables, a ``.env`` file and field
defaults. ``CompletionSettings.from_yaml`` loads a YAML mapping on top of
the environment.

The orchestrator polls these values per request; nothing is cached
beyond one request, so a settings provider can return a fresh object
each time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Union

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_completion.errors import ConfigurationError, ErrorCategory

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://open.bigmodel.cn/api/anthropic"
DEFAULT_MODEL = "glm-4.6"
DEFAULT_LOG_LEVEL = "info"
MIN_API_KEY_LENGTH = 10

LogLevel = Literal["none", "error", "warn", "info", "debug"]


class CompletionSettings(BaseSettings):
    """Settings for the completion pipeline and the HTTP backend."""

    model_config = SettingsConfigDict(
        env_prefix="AI_COMPLETION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    api_key: Optional[str] = Field(default=None, description="API key for the model service")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Model service base URL")
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    max_tokens: int = Field(default=1024, ge=1, le=8192)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    request_timeout: float = Field(default=15.0, gt=0, description="Backend timeout in seconds")

    # Pipeline
    enabled: bool = True
    delay: int = Field(default=500, ge=100, le=5000, description="Debounce delay in ms")
    cache_enabled: bool = True

    # Logging
    log_level: LogLevel = DEFAULT_LOG_LEVEL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'")
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def normalize_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty key as unset."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def delay_seconds(self) -> float:
        return self.delay / 1000

    @property
    def masked_api_key(self) -> str:
        """API key safe for display."""
        if not self.api_key:
            return "<not set>"
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigurationError."""
        if not self.api_key:
            raise ConfigurationError(
                "API key is not configured",
                setting="api_key",
                category=ErrorCategory.CONFIG_MISSING,
                recovery_hint="Set AI_COMPLETION_API_KEY or 'api_key' in the config file.",
            )
        return self.api_key

    def validation_errors(self) -> List[str]:
        """Problems that do not stop the settings from loading.

        Field ranges are enforced at construction; this reports what can
        still be wrong with a constructed object (e.g., a missing key).
        """
        errors = []
        if not self.api_key:
            errors.append("API key is not set")
        elif len(self.api_key) < MIN_API_KEY_LENGTH:
            errors.append(f"API key looks too short (< {MIN_API_KEY_LENGTH} characters)")
        return errors

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> "CompletionSettings":
        """Load settings from a YAML file.

        Values from the file take priority over the environment; explicit
        overrides take priority over both.

        Raises:
            ConfigurationError: If the file cannot be read or is not a mapping
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load settings from {path}: {e}",
                category=ErrorCategory.CONFIG_INVALID,
                cause=e,
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {path} must contain a mapping, got {type(data).__name__}"
            )

        logger.debug(f"Loaded {len(data)} settings from {path}")
        return cls(**{**data, **overrides})

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Dump settings, masking the API key by default."""
        data = self.model_dump()
        if mask_secrets:
            data["api_key"] = self.masked_api_key if self.api_key else None
        return data

    def to_yaml(self, mask_secrets: bool = True) -> str:
        """Export settings as YAML."""
        return yaml.safe_dump(self.to_dict(mask_secrets=mask_secrets), sort_keys=False)


SettingsSource = Union[CompletionSettings, Callable[[], CompletionSettings]]


def resolve_settings(source: SettingsSource) -> CompletionSettings:
    """Return current settings from an instance or a provider callable."""
    if isinstance(source, CompletionSettings):
        return source
    return source()
