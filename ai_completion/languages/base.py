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

"""Base types for language plugins.

A language plugin contributes one LanguageConfig: a fixed bundle of
compiled patterns used by the context analyzer to recognise declarations,
imports and statement kinds on a single line of source text.

Pattern capture groups are named rather than numbered so a pattern with
several alternatives can expose the same logical field more than once:
every group whose name starts with ``name`` is a candidate for the
declared name, every group starting with ``params`` for the parameter
list, and so on. The first non-empty candidate wins.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class LanguageConfig:
    """Pattern bundle for a programming language.

    All patterns are matched against whitespace-trimmed lines.
    """

    # Identity
    name: str  # Canonical name (e.g., "python")
    display_name: str  # Human-readable name (e.g., "Python")
    aliases: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)

    # Declarations
    function_pattern: re.Pattern[str] = re.compile(r"(?!)")
    class_pattern: re.Pattern[str] = re.compile(r"(?!)")
    import_pattern: re.Pattern[str] = re.compile(r"(?!)")
    variable_pattern: re.Pattern[str] = re.compile(r"(?!)")

    # Statement kinds
    comment_pattern: re.Pattern[str] = re.compile(r"(?!)")
    string_pattern: re.Pattern[str] = re.compile(r"(?!)")
    conditional_pattern: re.Pattern[str] = re.compile(r"(?!)")
    loop_pattern: re.Pattern[str] = re.compile(r"(?!)")
    return_pattern: re.Pattern[str] = re.compile(r"(?!)")
    try_catch_pattern: re.Pattern[str] = re.compile(r"(?!)")

    # Optional extras
    property_pattern: Optional[re.Pattern[str]] = None
    async_pattern: Optional[re.Pattern[str]] = None


def first_group(match: "re.Match[str]", prefix: str) -> Optional[str]:
    """Return the first non-empty named group whose name starts with prefix."""
    for group_name, value in match.groupdict().items():
        if group_name.startswith(prefix) and value:
            return value.strip()
    return None


@runtime_checkable
class LanguagePlugin(Protocol):
    """Protocol for language plugins."""

    @property
    def config(self) -> LanguageConfig:
        """Get language configuration."""
        ...

    def detect_from_file(self, path: Path) -> bool:
        """Check if this language handles the given file."""
        ...


class BaseLanguagePlugin(ABC):
    """Base class for language plugins with common functionality."""

    def __init__(self):
        """Initialize plugin."""
        self._config: Optional[LanguageConfig] = None

    @property
    def config(self) -> LanguageConfig:
        """Get language configuration."""
        if self._config is None:
            self._config = self._create_config()
        return self._config

    @abstractmethod
    def _create_config(self) -> LanguageConfig:
        """Create language configuration."""
        ...

    def detect_from_file(self, path: Path) -> bool:
        """Check if this language handles the file."""
        return path.suffix.lower() in [e.lower() for e in self.config.extensions]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.config.name!r})"
