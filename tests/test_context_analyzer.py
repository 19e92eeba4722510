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

"""Tests for the context analyzer."""

import time
from unittest.mock import MagicMock

import pytest

from ai_completion.analysis import (
    ContextAnalyzer,
    LineKind,
    VariableScope,
    parse_parameters,
)
from ai_completion.document import InMemoryDocument, Position
from conftest import make_document


def analyze_at_end(analyzer, text: str, language: str = "python"):
    """Analyze with the cursor at the end of the last line."""
    document = make_document(text, language)
    last = document.line_count - 1
    return analyzer.analyze(document, Position(last, len(document.line_at(last))))


class TestPythonScenario:
    """End-to-end analysis of a small Python function."""

    def test_add_function(self, analyzer):
        """Cursor on an indented blank line inside add(a, b)."""
        document = InMemoryDocument(
            uri="file:///add.py",
            language_id="python",
            lines=("def add(a, b):", "    total = a + b", "    "),
        )

        context = analyzer.analyze(document, Position(line=2, character=4))

        assert context.enclosing_function.name == "add"
        assert context.enclosing_function.parameter_names == ["a", "b"]
        assert context.enclosing_function.declaration_line == 0
        assert context.line_kind == LineKind.GENERAL
        assert context.indentation == "    "
        assert context.current_line_prefix == "    "
        assert context.preceding_lines == ["def add(a, b):", "    total = a + b"]
        assert context.following_lines == []

    def test_variables_and_parameters(self, analyzer):
        """Scanned variables come first, then the function's parameters."""
        context = analyze_at_end(analyzer, "def add(a, b):\n    total = a + b\n    ")

        assert [(v.name, v.scope) for v in context.local_variables] == [
            ("total", VariableScope.GLOBAL)
        ]
        assert context.local_variables[0].declared_value == "a + b"
        assert [(v.name, v.scope) for v in context.in_scope_variables()] == [
            ("total", VariableScope.GLOBAL),
            ("a", VariableScope.PARAMETER),
            ("b", VariableScope.PARAMETER),
        ]


class TestScopes:
    """Tests for function and class scope recovery."""

    def test_innermost_function_wins(self, analyzer):
        """The nearest declaration above the cursor is reported."""
        context = analyze_at_end(
            analyzer,
            "def outer(x):\n    def inner(y, z=2):\n        ",
        )

        assert context.enclosing_function.name == "inner"
        assert context.enclosing_function.parameter_names == ["y", "z"]
        assert context.enclosing_function.declaration_line == 1

    def test_async_function_with_annotations(self, analyzer):
        """Annotations and defaults are stripped; return type is kept."""
        context = analyze_at_end(
            analyzer,
            "async def fetch(url: str, timeout: float = 5.0) -> dict:\n    ",
        )

        func = context.enclosing_function
        assert func.name == "fetch"
        assert func.parameter_names == ["url", "timeout"]
        assert func.return_type_hint == "dict"
        assert func.is_async is True

    def test_python_class_scope(self, analyzer):
        """Class name, base, methods and properties are collected."""
        context = analyze_at_end(
            analyzer,
            "import os\n"
            "from typing import List\n"
            "\n"
            "class Dog(Animal):\n"
            "    def __init__(self, name):\n"
            "        self.name = name\n"
            "        self.age: int = 0\n"
            "\n"
            "    def bark(self):\n"
            "        ",
        )

        cls = context.enclosing_class
        assert cls.name == "Dog"
        assert cls.base_name == "Animal"
        assert cls.declaration_line == 3
        assert cls.method_names == ["__init__", "bark"]
        assert cls.property_names == ["name", "age"]
        assert context.enclosing_function.name == "bark"
        assert context.imports == ["import os", "from typing import List"]

    def test_no_scope_at_module_level(self, analyzer):
        """Module-level code has no enclosing function or class."""
        context = analyze_at_end(analyzer, "import sys\nvalue = 1\n")

        assert context.enclosing_function is None
        assert context.enclosing_class is None

    def test_java_class_with_constructor(self, analyzer):
        """Java constructors and methods are both methods of the class."""
        context = analyze_at_end(
            analyzer,
            "public class Account extends Base {\n"
            "    private int balance = 0;\n"
            "    public Account(int start) {\n"
            "        this.balance = start;\n"
            "    }\n"
            "    public void deposit(int amount) {\n"
            "        ",
            language="java",
        )

        assert context.enclosing_class.name == "Account"
        assert context.enclosing_class.base_name == "Base"
        assert context.enclosing_class.method_names == ["Account", "deposit"]
        assert context.enclosing_class.property_names == ["balance"]
        assert context.enclosing_function.name == "deposit"
        assert context.enclosing_function.return_type_hint == "void"
        assert context.enclosing_function.parameter_names == ["amount"]
        assert [(v.name, v.declared_type, v.declared_value) for v in context.local_variables] == [
            ("balance", "int", "0")
        ]

    def test_javascript_arrow_function(self, analyzer):
        """Arrow functions bound to const are recognised."""
        context = analyze_at_end(
            analyzer,
            "const handler = async (req, res) => {\n  ",
            language="javascript",
        )

        assert context.enclosing_function.name == "handler"
        assert context.enclosing_function.parameter_names == ["req", "res"]
        assert context.enclosing_function.is_async is True

    def test_anonymous_function(self, analyzer):
        """A function without a name is reported as anonymous."""
        context = analyze_at_end(
            analyzer,
            "export default function (a) {\n  ",
            language="javascript",
        )

        assert context.enclosing_function.name == "anonymous"
        assert context.enclosing_function.parameter_names == ["a"]

    def test_typescript_return_type(self, analyzer):
        """TypeScript return annotations are captured."""
        context = analyze_at_end(
            analyzer,
            "export async function load(id: string): Promise<User> {\n  ",
            language="typescript",
        )

        func = context.enclosing_function
        assert func.name == "load"
        assert func.parameter_names == ["id"]
        assert func.return_type_hint == "Promise<User>"
        assert func.is_async is True


class TestImportsAndVariables:
    """Tests for import and variable extraction."""

    def test_imports_scan_whole_document(self, analyzer):
        """Imports below the cursor are included, duplicates dropped."""
        document = make_document("import os\nx = 1\nimport json\nimport os\n")

        context = analyzer.analyze(document, Position(1, 5))

        assert context.imports == ["import os", "import json"]

    def test_cpp_includes(self, analyzer):
        """C++ includes are imports."""
        context = analyze_at_end(
            analyzer, '#include <vector>\n#include "util.h"\nint main() {\n  ', language="cpp"
        )

        assert context.imports == ["#include <vector>", '#include "util.h"']

    def test_variables_most_recent_first(self, analyzer):
        """Backward scan lists the latest declaration first, without de-duplication."""
        context = analyze_at_end(analyzer, "x = 1\ny = 2\nx = 3\n")

        assert [(v.name, v.line) for v in context.local_variables] == [
            ("x", 2),
            ("y", 1),
            ("x", 0),
        ]

    def test_variable_on_cursor_line_is_local(self, analyzer):
        """A declaration on the cursor line has local scope."""
        context = analyze_at_end(analyzer, "limit: int = 10")

        variable = context.local_variables[0]
        assert variable.name == "limit"
        assert variable.declared_type == "int"
        assert variable.declared_value == "10"
        assert variable.scope == VariableScope.LOCAL


class TestLineKind:
    """Tests for line classification precedence."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("def run(self):", LineKind.FUNCTION_DECLARATION),
            ("async def fetch(url):", LineKind.FUNCTION_DECLARATION),
            ("class Foo:", LineKind.CLASS_DECLARATION),
            ("import os", LineKind.IMPORT_STATEMENT),
            ("from a.b import c", LineKind.IMPORT_STATEMENT),
            ("value = compute()", LineKind.VARIABLE_DECLARATION),
            ("# note", LineKind.COMMENT),
            ('"""Docstring', LineKind.STRING_LITERAL),
            ("if x > 1:", LineKind.CONDITIONAL_STATEMENT),
            ("else:", LineKind.CONDITIONAL_STATEMENT),
            ("for item in items:", LineKind.LOOP_STATEMENT),
            ("return total", LineKind.RETURN_STATEMENT),
            ("try:", LineKind.TRY_CATCH),
            ("print(total)", LineKind.FUNCTION_CALL),
            ("x == 1", LineKind.GENERAL),
            ("", LineKind.GENERAL),
        ],
    )
    def test_python_line_kinds(self, analyzer, line, expected):
        """Each line gets exactly one kind."""
        context = analyze_at_end(analyzer, "    " + line)
        assert context.line_kind == expected

    def test_require_is_import_not_variable(self, analyzer):
        """Import precedence beats variable declaration."""
        context = analyze_at_end(analyzer, "const x = require('y')", language="javascript")
        assert context.line_kind == LineKind.IMPORT_STATEMENT

    def test_only_prefix_is_classified(self, analyzer):
        """Text after the cursor does not affect the kind."""
        document = make_document("result = print(x)")
        context = analyzer.analyze(document, Position(0, 3))

        assert context.current_line_prefix == "res"
        assert context.line_kind == LineKind.GENERAL

    def test_java_call_is_not_declaration(self, analyzer):
        """Statements like if (...) are not mistaken for methods."""
        context = analyze_at_end(analyzer, "if (ready) {", language="java")
        assert context.line_kind == LineKind.CONDITIONAL_STATEMENT


class TestDegradation:
    """Tests for best-effort behavior."""

    def test_unknown_language(self, analyzer):
        """Unknown languages give empty scopes and a general line kind."""
        context = analyze_at_end(analyzer, "IDENTIFICATION DIVISION.\n   MOVE", language="cobol")

        assert context.enclosing_function is None
        assert context.enclosing_class is None
        assert context.imports == []
        assert context.local_variables == []
        assert context.line_kind == LineKind.GENERAL
        assert context.indentation == "   "

    def test_empty_document(self, analyzer):
        """A document with no lines yields an empty context."""
        document = InMemoryDocument(uri="file:///empty.py", language_id="python")

        context = analyzer.analyze(document, Position(0, 0))

        assert context.current_line_prefix == ""
        assert context.preceding_lines == []

    def test_position_out_of_range(self, analyzer):
        """A cursor past the end of the document does not raise."""
        context = analyzer.analyze(make_document("x = 1"), Position(5, 0))
        assert context.line_kind == LineKind.GENERAL

    def test_document_errors_are_contained(self, analyzer):
        """Failures while reading the document never propagate."""
        document = MagicMock()
        document.uri = "file:///broken.py"
        document.language_id = "python"
        document.line_count = 3
        document.line_at.side_effect = RuntimeError("buffer closed")

        context = analyzer.analyze(document, Position(1, 0))

        assert context.language == "python"
        assert context.enclosing_function is None

    def test_context_window_is_clamped(self, analyzer):
        """At most ten lines are kept on either side of the cursor."""
        document = make_document("\n".join(f"line{i}" for i in range(30)))

        context = analyzer.analyze(document, Position(15, 0))
        assert context.preceding_lines == [f"line{i}" for i in range(5, 15)]
        assert context.following_lines == [f"line{i}" for i in range(16, 26)]

        context = analyzer.analyze(document, Position(2, 0))
        assert context.preceding_lines == ["line0", "line1"]

    def test_surrounding_text(self, analyzer):
        """Surrounding text joins the window around the full current line."""
        document = make_document("a = 1\nb = 2\nc = 3")
        context = analyzer.analyze(document, Position(1, 1))

        assert context.surrounding_text(document.line_at(1)) == "a = 1\nb = 2\nc = 3"


class TestParseParameters:
    """Tests for parameter list parsing."""

    @pytest.mark.parametrize(
        "params, expected",
        [
            ("a, b", ["a", "b"]),
            ("self, name: str = 'x'", ["self", "name"]),
            ("int count, final String label", ["count", "label"]),
            ("*args, **kwargs", ["args", "kwargs"]),
            ("", []),
            (None, []),
        ],
    )
    def test_parse(self, params, expected):
        assert parse_parameters(params) == expected


class TestDeclarationPatterns:
    """Tests for C-family declaration matching."""

    @pytest.mark.parametrize(
        "line, name, return_type, params",
        [
            ("int main() {", "main", "int", []),
            ("static const std::string& label(int id) const {", "label", "const std::string", ["id"]),
            ("unsigned int* buffer(size_t n);", "buffer", "unsigned int", ["n"]),
            ("std::map<int, int> index(const Data &d) {", "index", "std::map<int, int>", ["d"]),
        ],
    )
    def test_cpp_functions(self, analyzer, line, name, return_type, params):
        context = analyze_at_end(analyzer, line + "\n  ", language="cpp")

        func = context.enclosing_function
        assert func.name == name
        assert func.return_type_hint == return_type
        assert func.parameter_names == params

    def test_java_generic_return_type(self, analyzer):
        context = analyze_at_end(
            analyzer,
            "public Map<String, List<Integer>> group(List<Integer> xs) {\n    ",
            language="java",
        )

        func = context.enclosing_function
        assert func.name == "group"
        assert func.return_type_hint == "Map<String, List<Integer>>"
        assert func.parameter_names == ["xs"]

    @pytest.mark.parametrize("language", ["cpp", "java"])
    def test_long_whitespace_run_is_fast(self, analyzer, language):
        """Lines with long runs of spaces and no parenthesis stay cheap to scan."""
        text = "int" + " " * 1200 + "x\n" + ("long" + " " * 1000 + "y\n") * 5

        start = time.perf_counter()
        context = analyze_at_end(analyzer, text, language=language)
        elapsed = time.perf_counter() - start

        assert elapsed < 1.0
        assert context.enclosing_function is None
