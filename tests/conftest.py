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

"""Shared pytest fixtures and configuration."""

import asyncio
from typing import Optional

import pytest

from ai_completion.analysis import ContextAnalyzer
from ai_completion.completion.protocol import CompletionRequest, CompletionResponse
from ai_completion.config import CompletionSettings
from ai_completion.document import InMemoryDocument
from ai_completion.languages import LanguageConfigRegistry


class FakeBackend:
    """Backend that records requests and returns a canned response.

    If ``gate`` is set, each call waits for it before answering, which
    lets tests act while a request is in flight.
    """

    def __init__(
        self,
        response: Optional[CompletionResponse] = None,
        gate: Optional[asyncio.Event] = None,
        error: Optional[Exception] = None,
    ):
        self.response = response or CompletionResponse(
            success=True, text="suggestion", input_tokens=10, output_tokens=5
        )
        self.gate = gate
        self.error = error
        self.requests: list[CompletionRequest] = []

    @property
    def name(self) -> str:
        return "fake"

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


class RecordingSink:
    """Token usage sink that records every call."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def add_tokens(self, input_tokens: int, output_tokens: int) -> None:
        self.calls.append((input_tokens, output_tokens))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep AI_COMPLETION_* variables from leaking into settings."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("AI_COMPLETION_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(scope="session")
def registry():
    """Registry with the built-in languages."""
    return LanguageConfigRegistry.with_builtin_languages()


@pytest.fixture
def analyzer(registry):
    return ContextAnalyzer(registry)


@pytest.fixture
def settings():
    """Fast settings: shortest allowed debounce, no .env file."""
    return CompletionSettings(_env_file=None, api_key="test-key-1234567890", delay=100)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def sink():
    return RecordingSink()


def make_document(text: str, language: str = "python", uri: str = "file:///test") -> InMemoryDocument:
    """Build a document from text."""
    return InMemoryDocument.from_text(text, language, uri=uri)


@pytest.fixture
def restore_package_logger():
    """Undo configure_logging so later tests see default logging."""
    import logging

    logger = logging.getLogger("ai_completion")
    yield logger
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
