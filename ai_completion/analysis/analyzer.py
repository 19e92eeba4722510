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

"""Pattern-based context analysis around a cursor.

The analyzer reads a document through the TextDocument protocol and uses
the language config's compiled patterns to recover:

- the nearest function and class declarations above the cursor
- variable declarations, most recent first
- the document's import lines
- the kind of statement being typed on the current line

Scope recovery is an upward text scan that stops at the first matching
declaration. There is no brace or indentation depth tracking, so a
declaration that has already been closed can still be reported as the
enclosing one.
"""

import logging
from typing import Optional

from ai_completion.analysis.models import (
    ClassScope,
    CodeContext,
    FunctionScope,
    LineKind,
    VariableInfo,
    VariableScope,
)
from ai_completion.document import Position, TextDocument
from ai_completion.languages.base import LanguageConfig, first_group
from ai_completion.languages.registry import LanguageConfigRegistry

logger = logging.getLogger(__name__)

CONTEXT_LINES = 10


class ContextAnalyzer:
    """Builds a CodeContext for a cursor position.

    Example:
        analyzer = ContextAnalyzer(LanguageConfigRegistry.with_builtin_languages())
        context = analyzer.analyze(document, Position(line=2, character=4))
        print(context.enclosing_function.name)
    """

    def __init__(
        self,
        registry: Optional[LanguageConfigRegistry] = None,
        context_lines: int = CONTEXT_LINES,
    ):
        """Initialize the analyzer.

        Args:
            registry: Language configs (built-in languages if None)
            context_lines: Lines collected above and below the cursor
        """
        self._registry = (
            registry if registry is not None else LanguageConfigRegistry.with_builtin_languages()
        )
        self._context_lines = context_lines

    @property
    def registry(self) -> LanguageConfigRegistry:
        return self._registry

    def analyze(self, document: TextDocument, position: Position) -> CodeContext:
        """Analyze the code around a position.

        Never raises. Unknown languages and analysis failures produce a
        context with empty scopes and a GENERAL line kind.
        """
        context = CodeContext(language=document.language_id)
        try:
            self._populate(context, document, position)
        except Exception as e:
            logger.warning(
                f"Context analysis failed for {document.uri} at {position}: {e}"
            )
        return context

    def _populate(self, context: CodeContext, document: TextDocument, position: Position) -> None:
        line_count = document.line_count
        if line_count == 0 or not 0 <= position.line < line_count:
            return

        current_line = document.line_at(position.line)
        context.current_line_prefix = current_line[: max(position.character, 0)]
        context.indentation = _leading_whitespace(current_line)

        start = max(0, position.line - self._context_lines)
        end = min(line_count, position.line + self._context_lines + 1)
        context.preceding_lines = [document.line_at(i) for i in range(start, position.line)]
        context.following_lines = [document.line_at(i) for i in range(position.line + 1, end)]

        config = self._registry.lookup(document.language_id)
        if config is None:
            logger.debug(f"No language config for '{document.language_id}'")
            return

        context.enclosing_function = self._find_function(document, position.line, config)
        context.enclosing_class = self._find_class(document, position.line, config)
        context.imports = self._extract_imports(document, config)
        context.local_variables = self._extract_variables(document, position.line, config)
        context.line_kind = self.classify_line(context.current_line_prefix, config)

    # =========================================================================
    # Scopes
    # =========================================================================

    def _find_function(
        self, document: TextDocument, cursor_line: int, config: LanguageConfig
    ) -> Optional[FunctionScope]:
        for line in range(cursor_line, -1, -1):
            trimmed = document.line_at(line).strip()
            match = config.function_pattern.search(trimmed)
            if not match:
                continue
            return FunctionScope(
                name=first_group(match, "name") or "anonymous",
                parameter_names=parse_parameters(first_group(match, "params")),
                return_type_hint=first_group(match, "return_type"),
                declaration_line=line,
                is_async=bool(config.async_pattern and config.async_pattern.search(trimmed)),
            )
        return None

    def _find_class(
        self, document: TextDocument, cursor_line: int, config: LanguageConfig
    ) -> Optional[ClassScope]:
        for line in range(cursor_line, -1, -1):
            match = config.class_pattern.search(document.line_at(line).strip())
            if not match:
                continue
            name = first_group(match, "name")
            if not name:
                continue
            return ClassScope(
                name=name,
                base_name=first_group(match, "base"),
                declaration_line=line,
                method_names=self._extract_methods(document, line, cursor_line, config),
                property_names=self._extract_properties(document, line, cursor_line, config),
            )
        return None

    def _extract_methods(
        self, document: TextDocument, class_line: int, cursor_line: int, config: LanguageConfig
    ) -> list[str]:
        methods = []
        for line in range(class_line + 1, cursor_line):
            match = config.function_pattern.search(document.line_at(line).strip())
            if match:
                methods.append(first_group(match, "name") or "anonymous")
        return methods

    def _extract_properties(
        self, document: TextDocument, class_line: int, cursor_line: int, config: LanguageConfig
    ) -> list[str]:
        if config.property_pattern is None:
            return []
        properties = []
        for line in range(class_line + 1, cursor_line):
            match = config.property_pattern.search(document.line_at(line).strip())
            if match:
                name = first_group(match, "name")
                if name:
                    properties.append(name)
        return properties

    # =========================================================================
    # Imports and variables
    # =========================================================================

    def _extract_imports(self, document: TextDocument, config: LanguageConfig) -> list[str]:
        imports: dict[str, None] = {}
        for line in range(document.line_count):
            trimmed = document.line_at(line).strip()
            if trimmed and config.import_pattern.search(trimmed):
                imports.setdefault(trimmed, None)
        return list(imports)

    def _extract_variables(
        self, document: TextDocument, cursor_line: int, config: LanguageConfig
    ) -> list[VariableInfo]:
        variables = []
        for line in range(cursor_line, -1, -1):
            match = config.variable_pattern.search(document.line_at(line).strip())
            if not match:
                continue
            name = first_group(match, "name")
            if not name:
                continue
            variables.append(
                VariableInfo(
                    name=name,
                    declared_type=first_group(match, "type"),
                    declared_value=first_group(match, "value"),
                    line=line,
                    scope=VariableScope.LOCAL if line == cursor_line else VariableScope.GLOBAL,
                )
            )
        return variables

    # =========================================================================
    # Line classification
    # =========================================================================

    @staticmethod
    def classify_line(text: str, config: LanguageConfig) -> LineKind:
        """Classify a line by first matching pattern.

        Patterns overlap (``const x = require('y')`` is both an import and
        a variable declaration), so the order below decides the result.
        """
        trimmed = text.strip()
        if not trimmed:
            return LineKind.GENERAL

        ordered = (
            (config.function_pattern, LineKind.FUNCTION_DECLARATION),
            (config.class_pattern, LineKind.CLASS_DECLARATION),
            (config.import_pattern, LineKind.IMPORT_STATEMENT),
            (config.variable_pattern, LineKind.VARIABLE_DECLARATION),
            (config.comment_pattern, LineKind.COMMENT),
            (config.string_pattern, LineKind.STRING_LITERAL),
            (config.conditional_pattern, LineKind.CONDITIONAL_STATEMENT),
            (config.loop_pattern, LineKind.LOOP_STATEMENT),
            (config.return_pattern, LineKind.RETURN_STATEMENT),
            (config.try_catch_pattern, LineKind.TRY_CATCH),
        )
        for pattern, kind in ordered:
            if pattern.search(trimmed):
                return kind

        if "(" in trimmed and ")" in trimmed:
            return LineKind.FUNCTION_CALL
        return LineKind.GENERAL


def parse_parameters(params: Optional[str]) -> list[str]:
    """Split a parameter list into bare names.

    Defaults (``=``) and type annotations (``:``) are stripped, so
    ``"a, b: int = 2"`` yields ``["a", "b"]``. For C-style declarations
    the last word is the name (``"final String s"`` yields ``"s"``).
    """
    if not params:
        return []
    names = []
    for param in params.split(","):
        words = param.split("=")[0].split(":")[0].split()
        if not words:
            continue
        name = words[-1].lstrip("*&.")
        if name:
            names.append(name)
    return names


def _leading_whitespace(text: str) -> str:
    return text[: len(text) - len(text.lstrip())]
