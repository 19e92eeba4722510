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

"""Read-only document access.

The completion pipeline never touches editor buffers directly; it reads
text through the small TextDocument protocol below. InMemoryDocument is
the implementation used by the CLI and the tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ai_completion.languages.registry import LanguageConfigRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """Zero-based cursor position in a document."""

    line: int
    character: int

    def __str__(self) -> str:
        return f"{self.line}:{self.character}"


@runtime_checkable
class TextDocument(Protocol):
    """Protocol for documents the completion pipeline can read."""

    @property
    def uri(self) -> str:
        """Stable document identity."""
        ...

    @property
    def language_id(self) -> str:
        """Editor language identifier (e.g., 'python')."""
        ...

    @property
    def line_count(self) -> int:
        """Number of lines in the document."""
        ...

    def line_at(self, index: int) -> str:
        """Text of a zero-based line, without the line terminator."""
        ...


@dataclass(frozen=True)
class InMemoryDocument:
    """Immutable document backed by a list of lines."""

    uri: str
    language_id: str
    lines: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_text(cls, text: str, language_id: str, uri: str = "untitled:1") -> "InMemoryDocument":
        """Create a document from raw text.

        A trailing newline yields a final empty line, as in an editor buffer.
        """
        lines = tuple(line.rstrip("\r") for line in text.split("\n"))
        return cls(uri=uri, language_id=language_id, lines=lines)

    @classmethod
    def from_path(
        cls,
        path: Path,
        language_id: Optional[str] = None,
        registry: Optional["LanguageConfigRegistry"] = None,
    ) -> "InMemoryDocument":
        """Read a document from disk.

        Args:
            path: File to read
            language_id: Explicit language; detected from the extension if None
            registry: Registry used for detection (built-in languages if None)
        """
        if language_id is None:
            if registry is None:
                from ai_completion.languages.registry import LanguageConfigRegistry

                registry = LanguageConfigRegistry.with_builtin_languages()
            language_id = registry.detect_language(path) or "plaintext"
            logger.debug(f"Detected language '{language_id}' for {path}")

        text = path.read_text(encoding="utf-8", errors="replace")
        return cls.from_text(text, language_id, uri=path.resolve().as_uri())

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_at(self, index: int) -> str:
        if index < 0 or index >= len(self.lines):
            raise IndexError(f"Line {index} out of range (document has {len(self.lines)} lines)")
        return self.lines[index]
