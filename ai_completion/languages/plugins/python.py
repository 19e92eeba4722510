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

"""Python language plugin."""

import re

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig


class PythonPlugin(BaseLanguagePlugin):
    """Python language plugin.

    Recognises:
    - def / async def with optional return annotation
    - class with optional base list
    - import / from ... import
    - plain and annotated assignments (comparisons excluded)
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="python",
            display_name="Python",
            aliases=["py", "python3"],
            extensions=[".py", ".pyw", ".pyi"],
            function_pattern=re.compile(
                r"^(?:async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)"
                r"(?:\s*->\s*(?P<return_type>[^:]+?))?\s*:"
            ),
            class_pattern=re.compile(r"^class\s+(?P<name>\w+)(?:\s*\(\s*(?P<base>[^)]*?)\s*\))?\s*:"),
            import_pattern=re.compile(r"^(?:import\s+[\w.]+|from\s+[\w.]+\s+import\b)"),
            variable_pattern=re.compile(
                r"^(?P<name>\w+)(?:\s*:\s*(?P<type>[^=]+?))?\s*=(?!=)\s*(?P<value>.+)"
            ),
            comment_pattern=re.compile(r"^#"),
            string_pattern=re.compile(r"^[rbfuRBFU]{0,2}['\"]"),
            conditional_pattern=re.compile(r"^(?:if|elif|else|match|case)\b"),
            loop_pattern=re.compile(r"^(?:async\s+)?(?:for|while)\s+"),
            return_pattern=re.compile(r"^(?:return|yield)\b"),
            try_catch_pattern=re.compile(r"^(?:try|except|finally)\b"),
            property_pattern=re.compile(r"^self\.(?P<name>\w+)\s*(?::[^=]+)?=(?!=)"),
            async_pattern=re.compile(r"\basync\b"),
        )
