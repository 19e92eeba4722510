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

"""HTTP completion backend.

Talks to a chat-style model API over HTTP. Two endpoint shapes are
supported, chosen from the base URL:

- ``.../coding/paas/v4`` base URLs use the OpenAI-style
  ``/chat/completions`` endpoint
- every other base URL uses the Anthropic-style ``/v1/messages`` endpoint

Response parsing accepts OpenAI ``choices``, Anthropic ``content`` blocks
and bare ``response``/``text`` fields. Failures are mapped onto the
BackendError hierarchy and returned as failed responses; nothing raises
out of ``complete``.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from ai_completion import __version__
from ai_completion.completion.backend import BaseCompletionBackend
from ai_completion.completion.formatting import strip_code_fences
from ai_completion.completion.protocol import CompletionRequest, CompletionResponse
from ai_completion.config import CompletionSettings, SettingsSource, resolve_settings
from ai_completion.errors import (
    BackendAuthError,
    BackendConnectionError,
    BackendError,
    BackendInvalidResponseError,
    BackendRateLimitError,
    BackendTimeoutError,
)
from ai_completion.prompts import build_messages

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_MARKER = "/coding/paas/v4"
USER_AGENT = f"ai-completion/{__version__}"


def resolve_endpoint(base_url: str) -> str:
    """Pick the request URL for a base URL."""
    base_url = base_url.rstrip("/")
    if CHAT_COMPLETIONS_MARKER in base_url:
        return f"{base_url}/chat/completions"
    return f"{base_url}/v1/messages"


def _first_int(mapping: Dict[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, int):
            return value
    return None


def parse_response(data: Any) -> Tuple[str, Optional[int], Optional[int]]:
    """Extract (text, input_tokens, output_tokens) from a response payload.

    Raises:
        BackendInvalidResponseError: If the payload has no recognisable shape
        BackendError: If the payload carries an ``error`` field
    """
    if not isinstance(data, dict):
        raise BackendInvalidResponseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    error = data.get("error")
    if error:
        message = error.get("message", error) if isinstance(error, dict) else error
        raise BackendError(f"Backend returned an error: {message}")

    choices = data.get("choices")
    content = data.get("content")
    if isinstance(choices, list) and choices:
        choice = choices[0] if isinstance(choices[0], dict) else {}
        message = choice.get("message") or {}
        text = message.get("content") or choice.get("text") or ""
    elif isinstance(content, list) and content:
        block = next(
            (b for b in content if isinstance(b, dict) and b.get("type") == "text"),
            {},
        )
        text = block.get("text") or ""
    elif data.get("response"):
        text = data["response"]
    elif data.get("text"):
        text = data["text"]
    else:
        raise BackendInvalidResponseError("Unrecognised response format", response_data=data)

    if not isinstance(text, str):
        text = ""
    text = strip_code_fences(text)

    usage = data.get("usage")
    if not isinstance(usage, dict):
        return text.strip(), None, None
    return (
        text.strip(),
        _first_int(usage, "prompt_tokens", "input_tokens"),
        _first_int(usage, "completion_tokens", "output_tokens"),
    )


class HTTPCompletionBackend(BaseCompletionBackend):
    """Completion backend for Anthropic- and OpenAI-style chat APIs.

    Example:
        backend = HTTPCompletionBackend(CompletionSettings())
        response = await backend.complete(
            CompletionRequest(prompt="def add(a, b):", language="python")
        )
        await backend.close()
    """

    def __init__(
        self,
        settings: SettingsSource,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the backend.

        Args:
            settings: Settings instance or a callable returning current settings
            client: HTTP client to use (created on first request if None)
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "http"

    @property
    def settings(self) -> CompletionSettings:
        return resolve_settings(self._settings)

    def _get_client(self, settings: CompletionSettings) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.request_timeout)
        return self._client

    def build_payload(self, request: CompletionRequest, settings: CompletionSettings) -> Dict[str, Any]:
        """Request body for a completion request."""
        return {
            "model": settings.model,
            "messages": build_messages(request),
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "stream": False,
        }

    async def _complete(self, request: CompletionRequest) -> CompletionResponse:
        settings = self.settings
        api_key = settings.require_api_key()
        endpoint = resolve_endpoint(settings.base_url)
        payload = self.build_payload(request, settings)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {api_key}",
            "User-Agent": USER_AGENT,
        }

        logger.debug(
            f"POST {endpoint} model={settings.model} max_tokens={request.max_tokens} "
            f"temperature={request.temperature}"
        )

        start = time.perf_counter()
        try:
            response = await self._get_client(settings).post(
                endpoint,
                json=payload,
                headers=headers,
                timeout=settings.request_timeout,
            )
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(
                f"Request to {endpoint} timed out",
                timeout=settings.request_timeout,
                endpoint=endpoint,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise BackendConnectionError(
                f"Cannot reach {endpoint}: {e}", endpoint=endpoint, cause=e
            ) from e

        latency = (time.perf_counter() - start) * 1000
        logger.info(
            f"Backend responded {response.status_code} in {latency:.0f}ms "
            f"(endpoint={endpoint}, model={settings.model})"
        )

        if response.status_code >= 400:
            raise self._status_error(response, endpoint)

        try:
            data = response.json()
        except ValueError as e:
            raise BackendInvalidResponseError(
                f"Response from {endpoint} is not JSON", endpoint=endpoint, cause=e
            ) from e

        text, input_tokens, output_tokens = parse_response(data)
        logger.debug(
            f"Parsed completion: {len(text)} chars, "
            f"input_tokens={input_tokens}, output_tokens={output_tokens}"
        )
        return CompletionResponse(
            success=True,
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency,
        )

    @staticmethod
    def _status_error(response: httpx.Response, endpoint: str) -> BackendError:
        status = response.status_code
        if status == 401:
            return BackendAuthError(
                "API key is invalid or expired", status_code=status, endpoint=endpoint
            )
        if status == 403:
            return BackendAuthError(
                "API access denied; check key permissions", status_code=status, endpoint=endpoint
            )
        if status == 429:
            retry_after = response.headers.get("retry-after")
            return BackendRateLimitError(
                "API rate limit exceeded",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=status,
                endpoint=endpoint,
            )
        if status == 500:
            return BackendError(
                "API server internal error", status_code=status, endpoint=endpoint
            )

        detail = response.reason_phrase
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                detail = error["message"]
            elif data.get("message"):
                detail = data["message"]
        return BackendError(f"API error ({status}): {detail}", status_code=status, endpoint=endpoint)

    async def is_healthy(self) -> bool:
        """Send a one-token probe request."""
        response = await self.complete(
            CompletionRequest(prompt="test", language="", max_tokens=1)
        )
        return response.success

    async def close(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
