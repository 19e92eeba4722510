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

"""Completion orchestrator.

The request pipeline between the editor integration and the backend:

    cursor event
        -> cache lookup (hit: return immediately, no backend, no usage)
        -> debounce per cache key (newer request for the key replaces the
           pending one)
        -> context analysis and backend call
        -> cache write with expired-entry sweep, usage accounting
        -> suggestion list

The contract toward the caller is "suggestions or nothing": every
failure is logged and turned into an empty list. Cancellation is
cooperative; the caller's signal is polled while waiting and checked
again before the backend call and before any cache or usage mutation.
"""

import asyncio
import logging
import time
from typing import Optional

from ai_completion.analysis.analyzer import ContextAnalyzer
from ai_completion.completion.backend import CompletionBackend
from ai_completion.completion.cache import CompletionCache
from ai_completion.completion.debounce import RequestDebouncer
from ai_completion.completion.formatting import format_insert_text, leading_whitespace
from ai_completion.completion.protocol import (
    CancellationSignal,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionMetrics,
    CompletionRequest,
    CompletionResponse,
    TokenUsageSink,
)
from ai_completion.config import CompletionSettings, SettingsSource, resolve_settings
from ai_completion.document import Position, TextDocument

logger = logging.getLogger(__name__)

# How often a waiting caller re-checks its cancellation signal
CANCELLATION_POLL_INTERVAL = 0.05


class CompletionOrchestrator:
    """Request pipeline for inline AI completions.

    Collaborators are injected; the orchestrator owns no global state.

    Example:
        orchestrator = CompletionOrchestrator(
            backend=HTTPCompletionBackend(settings),
            settings=settings,
            usage_sink=TokenCounter(),
        )
        suggestions = await orchestrator.request_suggestions(document, position, token)
    """

    def __init__(
        self,
        backend: CompletionBackend,
        settings: SettingsSource,
        analyzer: Optional[ContextAnalyzer] = None,
        cache: Optional[CompletionCache] = None,
        debouncer: Optional[RequestDebouncer] = None,
        usage_sink: Optional[TokenUsageSink] = None,
        poll_interval: float = CANCELLATION_POLL_INTERVAL,
    ):
        """Initialize the orchestrator.

        Args:
            backend: Completion backend
            settings: Settings instance or callable polled once per request
            analyzer: Context analyzer (built-in languages if None)
            cache: Suggestion cache (30s TTL if None)
            debouncer: Per-key debouncer
            usage_sink: Receives token counts for successful responses
            poll_interval: Seconds between cancellation checks while waiting
        """
        self._backend = backend
        self._settings = settings
        self._analyzer = analyzer if analyzer is not None else ContextAnalyzer()
        self._cache = cache if cache is not None else CompletionCache()
        self._debouncer = debouncer if debouncer is not None else RequestDebouncer()
        self._usage_sink = usage_sink
        self._poll_interval = poll_interval
        self._metrics = CompletionMetrics()

    @property
    def metrics(self) -> CompletionMetrics:
        """Get completion metrics."""
        return self._metrics

    def reset_metrics(self) -> None:
        """Reset all metrics."""
        self._metrics = CompletionMetrics()

    @property
    def cache(self) -> CompletionCache:
        return self._cache

    @property
    def debouncer(self) -> RequestDebouncer:
        return self._debouncer

    @staticmethod
    def cache_key(document: TextDocument, position: Position, line_prefix: str) -> str:
        """Key identifying a request by position and typed prefix."""
        return f"{document.uri}:{position.line}:{position.character}:{line_prefix}"

    async def request_suggestions(
        self,
        document: TextDocument,
        position: Position,
        signal: Optional[CancellationSignal] = None,
    ) -> list[str]:
        """Get suggestions for a cursor position.

        Args:
            document: Document being edited
            position: Cursor position
            signal: Cancellation signal from the editor

        Returns:
            Zero or one suggestion strings; never raises
        """
        try:
            settings = resolve_settings(self._settings)
            if not settings.enabled:
                logger.debug("Completion disabled; skipping request")
                return []
            if _is_cancelled(signal):
                logger.debug("Request cancelled before start")
                return []

            line_prefix = document.line_at(position.line)[: max(position.character, 0)]
            key = self.cache_key(document, position, line_prefix)

            if settings.cache_enabled:
                cached = self._cache.get(key)
                if cached is not None:
                    self._metrics.cache_hits += 1
                    logger.debug(f"Cache hit for {key!r}")
                    return [cached]
                self._metrics.cache_misses += 1

            task = self._debouncer.schedule(
                key,
                lambda: self._fetch(document, position, key, signal, settings),
                delay=settings.delay_seconds,
            )
            return await self._await_pending(task, signal)

        except Exception as e:
            logger.error(f"Completion request failed at {document.uri}:{position}: {e}")
            return []

    async def provide_completion_items(
        self,
        document: TextDocument,
        position: Position,
        signal: Optional[CancellationSignal] = None,
    ) -> CompletionList:
        """Get editor-ready completion items.

        Multi-line suggestions are re-indented with the leading whitespace
        of the text before the cursor. Items are ranked by arrival order.
        """
        suggestions = await self.request_suggestions(document, position, signal)
        if not suggestions:
            return CompletionList(is_incomplete=False, items=[])

        prefix = document.line_at(position.line)[: max(position.character, 0)]
        indentation = leading_whitespace(prefix)
        items = [
            self._create_item(text, index, indentation, document.language_id)
            for index, text in enumerate(suggestions)
        ]
        # Incomplete so the editor re-queries as the user keeps typing
        return CompletionList(is_incomplete=True, items=items)

    def clear_cache(self) -> None:
        """Drop cached suggestions and cancel pending requests."""
        self._cache.clear()
        self._debouncer.cancel_all()
        logger.info("Completion cache cleared")

    async def _await_pending(
        self, task: "asyncio.Task[list[str]]", signal: Optional[CancellationSignal]
    ) -> list[str]:
        while not task.done():
            if _is_cancelled(signal):
                logger.debug("Request cancelled while waiting")
                return []
            await asyncio.wait({task}, timeout=self._poll_interval)

        if task.cancelled():
            # Superseded by a newer request for the same key
            return []
        return task.result()

    async def _fetch(
        self,
        document: TextDocument,
        position: Position,
        key: str,
        signal: Optional[CancellationSignal],
        settings: CompletionSettings,
    ) -> list[str]:
        try:
            if _is_cancelled(signal):
                self._metrics.cancelled_requests += 1
                return []

            context = self._analyzer.analyze(document, position)
            prompt = context.current_line_prefix
            if not prompt.strip():
                logger.debug(f"Empty prompt for {key!r}; skipping backend")
                return []

            request = CompletionRequest(
                prompt=prompt,
                language=document.language_id,
                context=context.surrounding_text(document.line_at(position.line)),
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
                code_context=context,
            )

            if _is_cancelled(signal):
                self._metrics.cancelled_requests += 1
                logger.debug(f"Request {key!r} cancelled before backend call")
                return []

            self._metrics.total_requests += 1
            start = time.perf_counter()
            try:
                response = await self._backend.complete(request)
            except Exception as e:
                response = CompletionResponse.failure(str(e))
            elapsed_ms = (time.perf_counter() - start) * 1000

            if _is_cancelled(signal):
                self._metrics.cancelled_requests += 1
                logger.debug(f"Dropping result for cancelled request {key!r}")
                return []

            if not response.success:
                self._metrics.failed_requests += 1
                logger.warning(
                    f"Backend failure after {elapsed_ms:.0f}ms for "
                    f"{document.uri}:{position}: {response.error}"
                )
                return []
            if not response.text.strip():
                self._metrics.failed_requests += 1
                logger.debug(f"Backend returned no suggestion for {key!r}")
                return []

            self._metrics.successful_requests += 1
            self._metrics.total_latency_ms += elapsed_ms
            self._record_usage(response)

            if settings.cache_enabled:
                self._cache.set(key, response.text, context_snapshot=request.context)
            return [response.text]

        except Exception as e:
            self._metrics.failed_requests += 1
            logger.error(f"Completion pipeline error for {key!r}: {e}")
            return []

    def _record_usage(self, response: CompletionResponse) -> None:
        if not response.has_usage:
            return
        input_tokens = response.input_tokens or 0
        output_tokens = response.output_tokens or 0
        self._metrics.total_tokens_used += input_tokens + output_tokens
        if self._usage_sink is not None:
            self._usage_sink.add_tokens(input_tokens, output_tokens)

    @staticmethod
    def _create_item(text: str, index: int, indentation: str, language: str) -> CompletionItem:
        return CompletionItem(
            label=text,
            kind=CompletionItemKind.TEXT,
            insert_text=format_insert_text(text, indentation),
            sort_text=f"ai{index:03d}",
            detail="AI suggestion",
            documentation=f"### AI completion\n\n```{language}\n{text}\n```",
            provider="ai",
        )


def _is_cancelled(signal: Optional[CancellationSignal]) -> bool:
    return signal is not None and signal.is_cancellation_requested
