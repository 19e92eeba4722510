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

"""Completion protocol types.

Data types exchanged between the completion orchestrator, the backend
and the editor integration. Editor-facing types follow the shape of the
Language Server Protocol completion types.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

# Position belongs to the document model; re-exported for convenience
from ai_completion.document import Position

if TYPE_CHECKING:
    from ai_completion.analysis.models import CodeContext


class CompletionItemKind(IntEnum):
    """Kind of a completion item (subset of the LSP values)."""

    TEXT = 1
    METHOD = 2
    FUNCTION = 3
    VARIABLE = 6
    CLASS = 7
    MODULE = 9
    PROPERTY = 10
    KEYWORD = 14
    SNIPPET = 15


@dataclass
class CompletionRequest:
    """Request sent to a completion backend."""

    prompt: str  # Current line up to the cursor
    language: str  # Document language id
    context: str = ""  # Surrounding lines joined with newlines
    max_tokens: int = 1024
    temperature: float = 0.3
    code_context: Optional["CodeContext"] = None  # Analyzer output, for prompt hints


@dataclass
class CompletionResponse:
    """Result returned by a completion backend."""

    success: bool
    text: str = ""
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    error: Optional[str] = None
    latency_ms: float = 0.0

    @classmethod
    def failure(cls, error: str, latency_ms: float = 0.0) -> "CompletionResponse":
        return cls(success=False, error=error, latency_ms=latency_ms)

    @property
    def has_usage(self) -> bool:
        """True if the backend reported any token counts."""
        return self.input_tokens is not None or self.output_tokens is not None


@dataclass
class CompletionItem:
    """A completion item ready for the editor."""

    label: str  # The label shown in the completion list
    kind: CompletionItemKind = CompletionItemKind.TEXT
    detail: Optional[str] = None  # Short description
    documentation: Optional[str] = None  # Markdown documentation
    sort_text: Optional[str] = None  # Sort key (defaults to label)
    filter_text: Optional[str] = None  # Filter key (defaults to label)
    insert_text: Optional[str] = None  # Text to insert (defaults to label)
    provider: str = ""  # Which backend generated this


@dataclass
class CompletionList:
    """A collection of completion items."""

    is_incomplete: bool  # If true, further typing should trigger re-query
    items: list[CompletionItem] = field(default_factory=list)


@dataclass
class CacheEntry:
    """A cached suggestion."""

    suggestion_text: str
    created_at: float  # Seconds, from the cache's clock
    context_snapshot: str = ""


@dataclass
class CompletionMetrics:
    """Metrics for completion operations."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    cancelled_requests: int = 0
    total_latency_ms: float = 0.0
    total_tokens_used: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    @property
    def average_latency_ms(self) -> float:
        """Calculate average latency."""
        if self.successful_requests == 0:
            return 0.0
        return self.total_latency_ms / self.successful_requests

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests

    @property
    def cache_hit_rate(self) -> float:
        """Calculate cache hit rate."""
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0.0
        return self.cache_hits / lookups


@runtime_checkable
class CancellationSignal(Protocol):
    """Cooperative cancellation flag, polled by the orchestrator."""

    @property
    def is_cancellation_requested(self) -> bool: ...


class CancellationToken:
    """Simple settable CancellationSignal."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


@runtime_checkable
class TokenUsageSink(Protocol):
    """Receives token counts for each successful backend response."""

    def add_tokens(self, input_tokens: int, output_tokens: int) -> None: ...
