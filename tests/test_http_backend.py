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

"""Tests for the HTTP completion backend."""

import json

import httpx
import pytest

from ai_completion.completion.backends import HTTPCompletionBackend, parse_response, resolve_endpoint
from ai_completion.completion.protocol import CompletionRequest
from ai_completion.config import CompletionSettings
from ai_completion.errors import BackendError, BackendInvalidResponseError

ANTHROPIC_URL = "https://api.example.com/api/anthropic"
OPENAI_URL = "https://api.example.com/api/coding/paas/v4"

REQUEST = CompletionRequest(prompt="def add(a, b):", language="python", context="def add(a, b):")


def make_backend(handler, base_url: str = ANTHROPIC_URL, api_key: str = "test-key-1234567890"):
    settings = CompletionSettings(_env_file=None, api_key=api_key, base_url=base_url)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPCompletionBackend(settings, client=client), client


def json_handler(payload, status_code: int = 200, headers=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload, headers=headers)

    return handler


class TestEndpoint:
    """Tests for endpoint selection."""

    def test_anthropic_style(self):
        assert resolve_endpoint(ANTHROPIC_URL) == f"{ANTHROPIC_URL}/v1/messages"

    def test_chat_completions_style(self):
        assert resolve_endpoint(OPENAI_URL + "/") == f"{OPENAI_URL}/chat/completions"


class TestRequest:
    """Tests for the outgoing request."""

    @pytest.mark.asyncio
    async def test_headers_and_payload(self):
        """The request carries bearer auth and the chat payload."""
        seen = []
        backend, _ = make_backend(
            json_handler({"content": [{"type": "text", "text": "return a + b"}]}, seen=seen)
        )

        response = await backend.complete(REQUEST)

        assert response.success
        request = seen[0]
        assert str(request.url) == f"{ANTHROPIC_URL}/v1/messages"
        assert request.headers["authorization"] == "Bearer test-key-1234567890"
        assert request.headers["user-agent"].startswith("ai-completion/")
        body = json.loads(request.content)
        assert body["model"] == "glm-4.6"
        assert body["max_tokens"] == 1024
        assert body["temperature"] == 0.3
        assert body["stream"] is False
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert "python" in body["messages"][0]["content"]
        assert "def add(a, b):" in body["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_chat_completions_endpoint(self):
        seen = []
        backend, _ = make_backend(
            json_handler({"choices": [{"message": {"content": "x"}}]}, seen=seen),
            base_url=OPENAI_URL,
        )

        await backend.complete(REQUEST)

        assert str(seen[0].url) == f"{OPENAI_URL}/chat/completions"

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_without_request(self):
        seen = []
        backend, _ = make_backend(json_handler({"text": "x"}, seen=seen), api_key="")

        response = await backend.complete(REQUEST)

        assert not response.success
        assert response.error == "API key is not configured"
        assert seen == []


class TestResponseParsing:
    """Tests for payload shapes."""

    def test_openai_choices(self):
        data = {
            "choices": [{"message": {"content": "return a + b"}}],
            "usage": {"prompt_tokens": 12, "completion_tokens": 4},
        }
        assert parse_response(data) == ("return a + b", 12, 4)

    def test_openai_legacy_text(self):
        assert parse_response({"choices": [{"text": " x "}]}) == ("x", None, None)

    def test_anthropic_content_blocks(self):
        data = {
            "content": [{"type": "thinking", "text": "hmm"}, {"type": "text", "text": "y"}],
            "usage": {"input_tokens": 3, "output_tokens": 1},
        }
        assert parse_response(data) == ("y", 3, 1)

    def test_bare_response_and_text(self):
        assert parse_response({"response": "a"})[0] == "a"
        assert parse_response({"text": "b"})[0] == "b"

    def test_code_fences_stripped(self):
        data = {"text": "```python\nreturn a + b\n```"}
        assert parse_response(data)[0] == "return a + b"

    def test_unknown_shape(self):
        with pytest.raises(BackendInvalidResponseError):
            parse_response({"result": "x"})

    def test_not_an_object(self):
        with pytest.raises(BackendInvalidResponseError):
            parse_response(["x"])

    def test_error_field(self):
        with pytest.raises(BackendError, match="quota"):
            parse_response({"error": {"message": "quota exhausted"}})


class TestStatusMapping:
    """Tests for HTTP status handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,expected",
        [
            (401, "API key is invalid or expired"),
            (403, "API access denied; check key permissions"),
            (429, "API rate limit exceeded"),
            (500, "API server internal error"),
        ],
    )
    async def test_known_statuses(self, status, expected):
        backend, _ = make_backend(json_handler({}, status_code=status))

        response = await backend.complete(REQUEST)

        assert not response.success
        assert response.error == expected

    @pytest.mark.asyncio
    async def test_other_status_uses_body_message(self):
        backend, _ = make_backend(
            json_handler({"error": {"message": "upstream unavailable"}}, status_code=502)
        )

        response = await backend.complete(REQUEST)

        assert response.error == "API error (502): upstream unavailable"

    @pytest.mark.asyncio
    async def test_other_status_without_body(self):
        def handler(request):
            return httpx.Response(503, text="down")

        backend, _ = make_backend(handler)

        response = await backend.complete(REQUEST)

        assert response.error == "API error (503): Service Unavailable"

    def test_rate_limit_retry_after(self):
        response = httpx.Response(429, headers={"retry-after": "12"})
        error = HTTPCompletionBackend._status_error(response, "https://x")
        assert error.retry_after == 12


class TestTransportFailures:
    """Tests for network-level failures."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        backend, _ = make_backend(handler)

        response = await backend.complete(REQUEST)

        assert not response.success
        assert "timed out" in response.error
        assert response.latency_ms > 0

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend, _ = make_backend(handler)

        response = await backend.complete(REQUEST)

        assert not response.success
        assert response.error.startswith("Cannot reach")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        backend, _ = make_backend(handler)

        response = await backend.complete(REQUEST)

        assert not response.success
        assert "not JSON" in response.error


class TestLifecycle:
    """Tests for health checks and client ownership."""

    @pytest.mark.asyncio
    async def test_is_healthy(self):
        seen = []
        backend, _ = make_backend(json_handler({"text": "ok"}, seen=seen))

        assert await backend.is_healthy() is True
        assert json.loads(seen[0].content)["max_tokens"] == 1

    @pytest.mark.asyncio
    async def test_unhealthy(self):
        backend, _ = make_backend(json_handler({}, status_code=401))
        assert await backend.is_healthy() is False

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        backend, client = make_backend(json_handler({"text": "x"}))

        await backend.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_settings_callable(self):
        """Settings are re-read on each request."""
        seen = []
        current = {"model": "glm-4.6"}
        client = httpx.AsyncClient(transport=httpx.MockTransport(json_handler({"text": "x"}, seen=seen)))
        backend = HTTPCompletionBackend(
            lambda: CompletionSettings(_env_file=None, api_key="k" * 12, model=current["model"]),
            client=client,
        )

        await backend.complete(REQUEST)
        current["model"] = "other-model"
        await backend.complete(REQUEST)

        assert [json.loads(r.content)["model"] for r in seen] == ["glm-4.6", "other-model"]
