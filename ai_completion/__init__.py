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

"""AI inline code completion.

Sends the code around the cursor to a remote language model and turns
the reply into editor-ready suggestions. The package has two parts:

- a request pipeline (debouncing, caching, cancellation, formatting)
- a lightweight pattern-based context analyzer

Example usage:
    from ai_completion import CompletionOrchestrator, CompletionSettings
    from ai_completion.completion.backends import HTTPCompletionBackend

    settings = CompletionSettings.from_yaml(Path("completion.yaml"))
    orchestrator = CompletionOrchestrator(HTTPCompletionBackend(settings), settings)
"""

__version__ = "0.1.0"

from ai_completion.analysis import CodeContext, ContextAnalyzer, LineKind
from ai_completion.completion import (
    CancellationToken,
    CompletionCache,
    CompletionOrchestrator,
    RequestDebouncer,
)
from ai_completion.config import CompletionSettings
from ai_completion.document import InMemoryDocument, Position, TextDocument
from ai_completion.errors import BackendError, CompletionError, ConfigurationError
from ai_completion.languages import LanguageConfig, LanguageConfigRegistry
from ai_completion.usage import TokenCounter

__all__ = [
    "__version__",
    "CodeContext",
    "ContextAnalyzer",
    "LineKind",
    "CancellationToken",
    "CompletionCache",
    "CompletionOrchestrator",
    "RequestDebouncer",
    "CompletionSettings",
    "InMemoryDocument",
    "Position",
    "TextDocument",
    "BackendError",
    "CompletionError",
    "ConfigurationError",
    "LanguageConfig",
    "LanguageConfigRegistry",
    "TokenCounter",
]
