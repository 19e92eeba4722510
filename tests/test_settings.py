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

"""Tests for completion settings."""

import pytest
from pydantic import ValidationError

from ai_completion.config import DEFAULT_BASE_URL, CompletionSettings, resolve_settings
from ai_completion.errors import ConfigurationError, ErrorCategory


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        settings = CompletionSettings(_env_file=None)

        assert settings.api_key is None
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.model == "glm-4.6"
        assert settings.max_tokens == 1024
        assert settings.temperature == 0.3
        assert settings.enabled is True
        assert settings.cache_enabled is True
        assert settings.delay == 500
        assert settings.delay_seconds == 0.5
        assert settings.log_level == "info"


class TestValidation:
    """Tests for field validation."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("delay", 50),
            ("delay", 6000),
            ("max_tokens", 0),
            ("temperature", 2.5),
            ("request_timeout", 0),
            ("log_level", "trace"),
            ("base_url", "ftp://example.com"),
            ("model", ""),
        ],
    )
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            CompletionSettings(_env_file=None, **{field: value})

    def test_base_url_trailing_slash(self):
        settings = CompletionSettings(_env_file=None, base_url="https://api.example.com/v4/")
        assert settings.base_url == "https://api.example.com/v4"

    def test_blank_api_key_is_unset(self):
        assert CompletionSettings(_env_file=None, api_key="   ").api_key is None

    def test_validation_errors(self):
        """Soft checks report a missing or suspiciously short key."""
        assert CompletionSettings(_env_file=None).validation_errors() == ["API key is not set"]
        assert "too short" in CompletionSettings(_env_file=None, api_key="abc").validation_errors()[0]
        assert CompletionSettings(_env_file=None, api_key="a" * 20).validation_errors() == []

    def test_require_api_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CompletionSettings(_env_file=None).require_api_key()

        assert exc_info.value.category == ErrorCategory.CONFIG_MISSING
        assert exc_info.value.setting == "api_key"
        assert "AI_COMPLETION_API_KEY" in str(exc_info.value)


class TestSources:
    """Tests for environment and YAML loading."""

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("AI_COMPLETION_API_KEY", "env-key-123456")
        monkeypatch.setenv("AI_COMPLETION_DELAY", "250")
        monkeypatch.setenv("AI_COMPLETION_CACHE_ENABLED", "false")

        settings = CompletionSettings(_env_file=None)

        assert settings.api_key == "env-key-123456"
        assert settings.delay == 250
        assert settings.cache_enabled is False

    def test_from_yaml_with_overrides(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("model: custom-model\ndelay: 300\ntemperature: 0.1\n")

        settings = CompletionSettings.from_yaml(path, _env_file=None, delay=800)

        assert settings.model == "custom-model"
        assert settings.temperature == 0.1
        assert settings.delay == 800

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")

        assert CompletionSettings.from_yaml(path, _env_file=None).model == "glm-4.6"

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            CompletionSettings.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_invalid(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("model: [unclosed\n")

        with pytest.raises(ConfigurationError):
            CompletionSettings.from_yaml(path)

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            CompletionSettings.from_yaml(path)

    def test_resolve_settings(self):
        settings = CompletionSettings(_env_file=None)

        assert resolve_settings(settings) is settings
        assert resolve_settings(lambda: settings) is settings


class TestExport:
    """Tests for masking and export."""

    def test_masked_api_key(self):
        assert CompletionSettings(_env_file=None).masked_api_key == "<not set>"
        assert CompletionSettings(_env_file=None, api_key="short").masked_api_key == "*****"
        assert (
            CompletionSettings(_env_file=None, api_key="abcd1234efgh5678").masked_api_key
            == "abcd...5678"
        )

    def test_to_yaml_masks_key(self):
        settings = CompletionSettings(_env_file=None, api_key="abcd1234efgh5678")

        exported = settings.to_yaml()

        assert "abcd...5678" in exported
        assert "abcd1234efgh5678" not in exported
        assert "abcd1234efgh5678" in settings.to_yaml(mask_secrets=False)

    def test_to_dict_unset_key(self):
        assert CompletionSettings(_env_file=None).to_dict()["api_key"] is None
