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

"""Data types produced by the context analyzer.

A CodeContext is built fresh for every completion request and describes
the code around the cursor: enclosing declarations, visible variables,
imports and the kind of statement being typed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LineKind(str, Enum):
    """Classification of the line being edited."""

    FUNCTION_DECLARATION = "function_declaration"
    CLASS_DECLARATION = "class_declaration"
    IMPORT_STATEMENT = "import_statement"
    VARIABLE_DECLARATION = "variable_declaration"
    COMMENT = "comment"
    STRING_LITERAL = "string_literal"
    CONDITIONAL_STATEMENT = "conditional_statement"
    LOOP_STATEMENT = "loop_statement"
    RETURN_STATEMENT = "return_statement"
    TRY_CATCH = "try_catch"
    FUNCTION_CALL = "function_call"
    GENERAL = "general"


class VariableScope(str, Enum):
    """Where a variable is visible from the cursor."""

    LOCAL = "local"  # Declared on the cursor line
    PARAMETER = "parameter"  # Parameter of the enclosing function
    GLOBAL = "global"  # Declared on any earlier line


@dataclass
class FunctionScope:
    """Nearest function declaration above the cursor."""

    name: str
    parameter_names: list[str] = field(default_factory=list)
    return_type_hint: Optional[str] = None
    declaration_line: int = 0
    is_async: bool = False


@dataclass
class ClassScope:
    """Nearest class declaration above the cursor."""

    name: str
    base_name: Optional[str] = None
    declaration_line: int = 0
    method_names: list[str] = field(default_factory=list)
    property_names: list[str] = field(default_factory=list)


@dataclass
class VariableInfo:
    """A variable declaration found while scanning upward."""

    name: str
    declared_type: Optional[str] = None
    declared_value: Optional[str] = None
    line: int = 0
    scope: VariableScope = VariableScope.GLOBAL


@dataclass
class CodeContext:
    """Code surrounding a cursor position.

    Attributes:
        language: Document language id as reported by the editor
        current_line_prefix: Text of the current line up to the cursor
        preceding_lines: Up to 10 lines above the cursor, in document order
        following_lines: Up to 10 lines below the cursor, in document order
        enclosing_function: Innermost function found by upward scan
        enclosing_class: Innermost class found by upward scan
        imports: Import lines of the whole document, de-duplicated
        local_variables: Declarations found scanning upward, most recent first
        line_kind: Classification of the current line prefix
        indentation: Leading whitespace of the current line
    """

    language: str
    current_line_prefix: str = ""
    preceding_lines: list[str] = field(default_factory=list)
    following_lines: list[str] = field(default_factory=list)
    enclosing_function: Optional[FunctionScope] = None
    enclosing_class: Optional[ClassScope] = None
    imports: list[str] = field(default_factory=list)
    local_variables: list[VariableInfo] = field(default_factory=list)
    line_kind: LineKind = LineKind.GENERAL
    indentation: str = ""

    def in_scope_variables(self) -> list[VariableInfo]:
        """Scanned variables followed by the enclosing function's parameters."""
        variables = list(self.local_variables)
        if self.enclosing_function is not None:
            for param in self.enclosing_function.parameter_names:
                variables.append(
                    VariableInfo(
                        name=param,
                        line=self.enclosing_function.declaration_line,
                        scope=VariableScope.PARAMETER,
                    )
                )
        return variables

    def surrounding_text(self, current_line: str) -> str:
        """Join preceding lines, the full current line and following lines."""
        return "\n".join([*self.preceding_lines, current_line, *self.following_lines])

    def to_dict(self) -> dict:
        """Convert to a plain dictionary."""
        return {
            "language": self.language,
            "current_line_prefix": self.current_line_prefix,
            "enclosing_function": (
                {
                    "name": self.enclosing_function.name,
                    "parameters": self.enclosing_function.parameter_names,
                    "return_type": self.enclosing_function.return_type_hint,
                    "line": self.enclosing_function.declaration_line,
                    "is_async": self.enclosing_function.is_async,
                }
                if self.enclosing_function
                else None
            ),
            "enclosing_class": (
                {
                    "name": self.enclosing_class.name,
                    "base": self.enclosing_class.base_name,
                    "line": self.enclosing_class.declaration_line,
                    "methods": self.enclosing_class.method_names,
                    "properties": self.enclosing_class.property_names,
                }
                if self.enclosing_class
                else None
            ),
            "imports": self.imports,
            "variables": [
                {"name": v.name, "type": v.declared_type, "line": v.line, "scope": v.scope.value}
                for v in self.in_scope_variables()
            ],
            "line_kind": self.line_kind.value,
            "indentation": self.indentation,
        }
