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

"""Java language plugin."""

import re

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig

# Statement keywords that would otherwise read as "<type> <name>(...)".
_NOT_A_DECLARATION = r"(?!(?:if|else|for|while|switch|catch|return|throw|new|do|try)\b)"


class JavaPlugin(BaseLanguagePlugin):
    """Java language plugin."""

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="java",
            display_name="Java",
            aliases=[],
            extensions=[".java"],
            function_pattern=re.compile(
                rf"^{_NOT_A_DECLARATION}(?:(?:public|private|protected|static|final|abstract"
                r"|synchronized|native|default)\s+)*(?:<[^>]+>\s+)?"
                r"(?:(?P<return_type>[\w<>\[\],.?]+(?:\s+[\w<>\[\],.?]+)*?)\s+(?P<name>\w+)"
                r"|(?P<name_ctor>[A-Z]\w*))"
                r"\s*\((?P<params>[^)]*)\)"
                r"\s*(?:throws\s+[^{;]+)?\s*[{;]"
            ),
            class_pattern=re.compile(
                r"^(?:(?:public|private|protected|static|final|abstract|sealed)\s+)*"
                r"(?:class|record|enum)\s+(?P<name>\w+)(?:\s*<[^>]*>)?"
                r"(?:\s+extends\s+(?P<base>[\w.]+))?(?:\s+implements\s+[^{]+)?\s*\{?"
            ),
            import_pattern=re.compile(r"^import\s+(?:static\s+)?[\w.*]+\s*;"),
            variable_pattern=re.compile(
                rf"^{_NOT_A_DECLARATION}(?:final\s+)?(?:(?:private|public|protected|static|final)\s+)*"
                r"(?P<type>[\w<>\[\],.?]+)\s+(?P<name>\w+)\s*(?:=(?!=)\s*(?P<value>[^;]+))?;?$"
            ),
            comment_pattern=re.compile(r"^(?://|/\*|\*)"),
            string_pattern=re.compile(r"^\""),
            conditional_pattern=re.compile(r"^(?:if|else\s+if|switch)\s*\(|^else\b"),
            loop_pattern=re.compile(r"^(?:for|while)\s*\(|^do\b"),
            return_pattern=re.compile(r"^return\b"),
            try_catch_pattern=re.compile(r"^(?:try|catch|finally)\b"),
            property_pattern=re.compile(r"^this\.(?P<name>\w+)\s*=(?!=)"),
        )
