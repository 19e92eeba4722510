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

"""Suggestion text formatting."""


def leading_whitespace(text: str) -> str:
    """Return the run of whitespace at the start of text."""
    return text[: len(text) - len(text.lstrip())]


def format_insert_text(suggestion: str, indentation: str) -> str:
    """Re-indent a multi-line suggestion for insertion at the cursor.

    The first line is inserted as-is since the cursor already sits at the
    right column; every following line is prefixed with ``indentation``.

    >>> format_insert_text("a\\nb\\nc", "    ")
    'a\\n    b\\n    c'
    """
    lines = suggestion.split("\n")
    if len(lines) == 1:
        return suggestion
    return "\n".join([lines[0], *(indentation + line for line in lines[1:])])


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence if the model added one."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return text
    lines = stripped.split("\n")
    body = lines[1:]
    if body and body[-1].strip() == "```":
        body = body[:-1]
    return "\n".join(body)
