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

"""TypeScript language plugin.

Reuses the JavaScript statement patterns and adds type annotations to
the declaration patterns.
"""

import re

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig
from ai_completion.languages.plugins.javascript import (
    JS_ASYNC,
    JS_COMMENT,
    JS_CONDITIONAL,
    JS_IMPORT,
    JS_LOOP,
    JS_PROPERTY,
    JS_RETURN,
    JS_STRING,
    JS_TRY_CATCH,
)

_TYPE = r"[\w<>\[\],.|&? ]+?"


class TypeScriptPlugin(BaseLanguagePlugin):
    """TypeScript language plugin."""

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="typescript",
            display_name="TypeScript",
            aliases=["ts", "typescriptreact", "tsx"],
            extensions=[".ts", ".tsx", ".mts", ".cts"],
            function_pattern=re.compile(
                r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?"
                r"(?:function\s*\*?\s*(?P<name>\w+)?\s*(?:<[^>]*>)?\s*\((?P<params>[^)]*)\)"
                rf"(?:\s*:\s*(?P<return_type>{_TYPE}))?\s*(?:\{{|$)"
                r"|const\s+(?P<name_arrow>\w+)\s*(?::[^=]+)?=\s*(?:async\s+)?\((?P<params_arrow>[^)]*)\)"
                rf"(?:\s*:\s*(?P<return_type_arrow>{_TYPE}))?\s*=>"
                r"|(?:const|let|var)\s+(?P<name_expr>\w+)\s*=\s*(?:async\s+)?function\b"
                r"\s*\*?\s*\w*\s*\((?P<params_expr>[^)]*)\))"
            ),
            class_pattern=re.compile(
                r"^(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(?P<name>\w+)"
                r"(?:\s*<[^>]*>)?(?:\s+extends\s+(?P<base>[\w.]+))?"
                r"(?:\s+implements\s+[^{]+)?\s*\{?"
            ),
            import_pattern=JS_IMPORT,
            variable_pattern=re.compile(
                r"^(?:export\s+)?(?:const|let|var)\s+(?P<name>\w+)"
                r"(?:\s*:\s*(?P<type>[^=]+?))?(?:\s*=(?!=)\s*(?P<value>.+))?$"
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
