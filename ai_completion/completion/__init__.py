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

"""Inline completion request pipeline.

Example usage:
    from ai_completion.completion import CompletionOrchestrator, CancellationToken
    from ai_completion.completion.backends import HTTPCompletionBackend
    from ai_completion.config import CompletionSettings
    from ai_completion.document import InMemoryDocument, Position

    settings = CompletionSettings()
    orchestrator = CompletionOrchestrator(
        backend=HTTPCompletionBackend(settings),
        settings=settings,
    )

    document = InMemoryDocument.from_text("def add(a, b):\n    return ", "python")
    suggestions = await orchestrator.request_suggestions(
        document,
        Position(line=1, character=11),
        CancellationToken(),
    )
"""

from ai_completion.completion.backend import BaseCompletionBackend, CompletionBackend
from ai_completion.completion.cache import CacheStats, CompletionCache
from ai_completion.completion.debounce import RequestDebouncer
from ai_completion.completion.formatting import format_insert_text, leading_whitespace
from ai_completion.completion.manager import CompletionOrchestrator
from ai_completion.completion.protocol import (
    CacheEntry,
    CancellationSignal,
    CancellationToken,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionMetrics,
    CompletionRequest,
    CompletionResponse,
    Position,
    TokenUsageSink,
)

__all__ = [
    # Protocol types
    "CacheEntry",
    "CancellationSignal",
    "CancellationToken",
    "CompletionItem",
    "CompletionItemKind",
    "CompletionList",
    "CompletionMetrics",
    "CompletionRequest",
    "CompletionResponse",
    "Position",
    "TokenUsageSink",
    # Backend
    "BaseCompletionBackend",
    "CompletionBackend",
    # Pipeline
    "CacheStats",
    "CompletionCache",
    "RequestDebouncer",
    "CompletionOrchestrator",
    "format_insert_text",
    "leading_whitespace",
]
