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

"""Completion backend interface and base implementation.

A backend turns a CompletionRequest into a CompletionResponse by asking a
remote model. The orchestrator only knows this interface; transports and
vendor payload shapes live in concrete backends.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from ai_completion.completion.protocol import CompletionRequest, CompletionResponse
from ai_completion.errors import CompletionError

logger = logging.getLogger(__name__)


@runtime_checkable
class CompletionBackend(Protocol):
    """Protocol for completion backends.

    Implementations must report failures through
    ``CompletionResponse(success=False, error=...)`` rather than raising.
    """

    @property
    def name(self) -> str:
        """Unique identifier for this backend."""
        ...

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Produce a suggestion for the request.

        Args:
            request: Prompt, language, surrounding context and sampling options

        Returns:
            CompletionResponse with the suggestion text or an error
        """
        ...


class BaseCompletionBackend(ABC):
    """Abstract base class for completion backends.

    Wraps ``_complete`` so that unexpected exceptions become failed
    responses and latency is always recorded.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this backend."""
        ...

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        start = time.perf_counter()
        try:
            response = await self._complete(request)
        except CompletionError as e:
            latency = (time.perf_counter() - start) * 1000
            logger.warning(
                f"{self.name} backend failed after {latency:.0f}ms "
                f"[{e.category.value}]: {e.message} {e.details}"
            )
            return CompletionResponse.failure(e.message, latency_ms=latency)
        except Exception as e:
            latency = (time.perf_counter() - start) * 1000
            logger.error(f"{self.name} backend error after {latency:.0f}ms: {e}")
            return CompletionResponse.failure(str(e), latency_ms=latency)

        if not response.latency_ms:
            response.latency_ms = (time.perf_counter() - start) * 1000
        return response

    @abstractmethod
    async def _complete(self, request: CompletionRequest) -> CompletionResponse:
        """Backend-specific completion; may raise."""
        ...

    async def close(self) -> None:
        """Release backend resources. Default does nothing."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
