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

"""Chat prompts for completion requests."""

from typing import Optional

from ai_completion.analysis.models import CodeContext, LineKind
from ai_completion.completion.protocol import CompletionRequest

SYSTEM_PROMPT_TEMPLATE = """You are an expert coding assistant{language_context}. \
Provide accurate, concise code completions.
Rules:
1. Return only code, with no explanation.
2. Make sure the code is syntactically correct and idiomatic.
3. Match the style of the existing code.
4. Prefer performance and readability.
5. If you cannot determine a suitable completion, return an empty string.
6. Keep the completion short and practical.
Return the completion directly, without markdown code fences."""


def build_system_prompt(language: Optional[str] = None) -> str:
    """System prompt naming the language."""
    language_context = f" in {language}" if language else ""
    return SYSTEM_PROMPT_TEMPLATE.format(language_context=language_context)


def build_scope_hint(context: Optional[CodeContext]) -> str:
    """One-line description of where the cursor is, or empty."""
    if context is None:
        return ""

    parts = []
    if context.enclosing_class:
        parts.append(f"inside class {context.enclosing_class.name}")
    if context.enclosing_function:
        params = ", ".join(context.enclosing_function.parameter_names)
        parts.append(f"inside function {context.enclosing_function.name}({params})")
    if context.line_kind is not LineKind.GENERAL:
        parts.append(f"writing a {context.line_kind.value.replace('_', ' ')}")
    return "; ".join(parts)


def build_user_prompt(request: CompletionRequest) -> str:
    """User prompt with the context block, scope hint and current code."""
    prompt = "Complete the following code:\n\n"
    if request.context.strip():
        prompt += f"Context:\n```\n{request.context}\n```\n\n"
    hint = build_scope_hint(request.code_context)
    if hint:
        prompt += f"Cursor is {hint}.\n\n"
    prompt += f"Current code:\n```\n{request.prompt}\n```\n\n"
    prompt += "Provide the completion:"
    return prompt


def build_messages(request: CompletionRequest) -> list[dict[str, str]]:
    """System and user chat messages for a request."""
    return [
        {"role": "system", "content": build_system_prompt(request.language)},
        {"role": "user", "content": build_user_prompt(request)},
    ]
