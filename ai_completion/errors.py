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

"""Error types for the completion package.

Errors carry a category and an optional recovery hint so the editor
integration can show something actionable. None of them escape the
completion orchestrator: backends turn them into failed responses and
the orchestrator turns failures into an empty suggestion list.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""

    # Configuration errors
    CONFIG_INVALID = "config_invalid"
    CONFIG_MISSING = "config_missing"

    # Backend errors
    BACKEND_CONNECTION = "backend_connection"
    BACKEND_AUTH = "backend_auth"
    BACKEND_RATE_LIMIT = "backend_rate_limit"
    BACKEND_TIMEOUT = "backend_timeout"
    BACKEND_SERVER = "backend_server"
    BACKEND_INVALID_RESPONSE = "backend_invalid_response"

    UNKNOWN = "unknown"


class CompletionError(Exception):
    """Base exception for all completion errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        recovery_hint: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}
        self.recovery_hint = recovery_hint
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.message,
            "category": self.category.value,
            "recovery_hint": self.recovery_hint,
            "details": self.details,
        }

    def __str__(self) -> str:
        result = self.message
        if self.recovery_hint:
            result += f"\nRecovery hint: {self.recovery_hint}"
        return result


class ConfigurationError(CompletionError):
    """Invalid or missing configuration (e.g., no API key)."""

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.CONFIG_INVALID,
        **kwargs: Any,
    ):
        kwargs.setdefault(
            "recovery_hint",
            f"Set '{setting}' in the configuration file or environment." if setting else None,
        )
        super().__init__(message, category=category, **kwargs)
        self.setting = setting
        self.details["setting"] = setting


class BackendError(CompletionError):
    """Errors reported while talking to the completion backend."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("category", ErrorCategory.BACKEND_SERVER)
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.endpoint = endpoint
        if status_code is not None:
            self.details["status_code"] = status_code
        if endpoint is not None:
            self.details["endpoint"] = endpoint


class BackendConnectionError(BackendError):
    """The backend could not be reached."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            category=ErrorCategory.BACKEND_CONNECTION,
            recovery_hint="Check network connection and the configured base URL.",
            **kwargs,
        )


class BackendAuthError(BackendError):
    """The backend rejected the credentials (401/403)."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            category=ErrorCategory.BACKEND_AUTH,
            recovery_hint="Check your API key and its permissions.",
            **kwargs,
        )


class BackendRateLimitError(BackendError):
    """The backend rate limit was exceeded (429)."""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs: Any):
        super().__init__(
            message,
            category=ErrorCategory.BACKEND_RATE_LIMIT,
            recovery_hint=(
                f"Wait {retry_after} seconds before retrying."
                if retry_after
                else "Wait and retry later."
            ),
            **kwargs,
        )
        self.retry_after = retry_after
        self.details["retry_after"] = retry_after


class BackendTimeoutError(BackendError):
    """The backend did not answer in time."""

    def __init__(self, message: str, timeout: Optional[float] = None, **kwargs: Any):
        super().__init__(
            message,
            category=ErrorCategory.BACKEND_TIMEOUT,
            recovery_hint=(
                f"Request timed out after {timeout} seconds. Check backend status."
                if timeout
                else "Request timed out. Check backend status and network connection."
            ),
            **kwargs,
        )
        self.timeout = timeout
        self.details["timeout"] = timeout


class BackendInvalidResponseError(BackendError):
    """The backend returned a payload with no usable text."""

    def __init__(
        self,
        message: str,
        response_data: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(
            message,
            category=ErrorCategory.BACKEND_INVALID_RESPONSE,
            recovery_hint="The backend returned an unexpected response format.",
            **kwargs,
        )
        self.response_data = response_data
        if response_data:
            self.details["response_keys"] = list(response_data.keys())[:10]
