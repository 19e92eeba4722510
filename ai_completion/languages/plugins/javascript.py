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

"""JavaScript language plugin."""

import re

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig

# Shared by the TypeScript plugin, which only widens the declaration patterns.
JS_COMMENT = re.compile(r"^(?://|/\*|\*)")
JS_STRING = re.compile(r"^['\"`]")
JS_CONDITIONAL = re.compile(r"^(?:if|else\s+if|switch)\s*\(|^else\b")
JS_LOOP = re.compile(r"^(?:for|while)\s*\(|^do\b")
JS_RETURN = re.compile(r"^return\b")
JS_TRY_CATCH = re.compile(r"^(?:try|catch|finally)\b")
JS_IMPORT = re.compile(
    r"^(?:import\s+.*\bfrom\s+['\"][^'\"]+['\"]|import\s+['\"][^'\"]+['\"]"
    r"|(?:const|let|var)\s+.*=\s*require\(\s*['\"][^'\"]+['\"]\s*\))"
)
JS_PROPERTY = re.compile(r"^this\.(?P<name>\w+)\s*=(?!=)")
JS_ASYNC = re.compile(r"\basync\b")


class JavaScriptPlugin(BaseLanguagePlugin):
    """JavaScript language plugin.

    Function declarations cover ``function name()``, arrow functions bound
    to ``const`` and function expressions bound to ``const``/``let``/``var``.
    """

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="javascript",
            display_name="JavaScript",
            aliases=["js", "javascriptreact", "jsx", "node"],
            extensions=[".js", ".jsx", ".mjs", ".cjs"],
            function_pattern=re.compile(
                r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?"
                r"(?:function\s*\*?\s*(?P<name>\w+)?\s*\((?P<params>[^)]*)\)"
                r"|const\s+(?P<name_arrow>\w+)\s*=\s*(?:async\s+)?\((?P<params_arrow>[^)]*)\)\s*=>"
                r"|(?:const|let|var)\s+(?P<name_expr>\w+)\s*=\s*(?:async\s+)?function\b"
                r"\s*\*?\s*\w*\s*\((?P<params_expr>[^)]*)\))"
            ),
            class_pattern=re.compile(
                r"^(?:export\s+)?(?:default\s+)?class\s+(?P<name>\w+)"
                r"(?:\s+extends\s+(?P<base>[\w.]+))?\s*\{?"
            ),
            import_pattern=JS_IMPORT,
            variable_pattern=re.compile(
                r"^(?:export\s+)?(?:const|let|var)\s+(?P<name>\w+)"
                r"(?:\s*=(?!=)\s*(?P<value>.+))?"
            ),
            comment_pattern=JS_COMMENT,
            string_pattern=JS_STRING,
            conditional_pattern=JS_CONDITIONAL,
            loop_pattern=JS_LOOP,
            return_pattern=JS_RETURN,
            try_catch_pattern=JS_TRY_CATCH,
            property_pattern=JS_PROPERTY,
            async_pattern=JS_ASYNC,
        )
