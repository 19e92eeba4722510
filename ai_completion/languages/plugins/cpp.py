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

"""C/C++ language plugin."""

import re

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig

_NOT_A_DECLARATION = r"(?!(?:if|else|for|while|switch|catch|return|throw|new|delete|do|try)\b)"


class CppPlugin(BaseLanguagePlugin):
    """C++ language plugin (also serves plain C)."""

    def _create_config(self) -> LanguageConfig:
        return LanguageConfig(
            name="cpp",
            display_name="C++",
            aliases=["c++", "c", "objective-c", "cuda-cpp"],
            extensions=[".cpp", ".cc", ".cxx", ".hpp", ".hh", ".hxx", ".c", ".h"],
            function_pattern=re.compile(
                rf"^{_NOT_A_DECLARATION}(?:template\s*<[^>]*>\s*)?"
                r"(?:(?:static|inline|virtual|constexpr|extern|explicit)\s+)*"
                r"(?P<return_type>[\w:<>,]+(?:(?:\s*[*&]+\s*|\s+)[\w:<>,]+)*?)"
                r"(?:\s*[*&]+\s*|\s+)(?P<name>[\w:~]+)\s*"
                r"\((?P<params>[^)]*)\)\s*(?:const\s*)?(?:noexcept\s*)?(?:override\s*)?[{;]"
            ),
            class_pattern=re.compile(
                r"^(?:template\s*<[^>]*>\s*)?(?:class|struct)\s+(?P<name>\w+)"
                r"(?:\s*:\s*(?:public|private|protected)?\s*(?P<base>[\w:]+))?\s*\{?$"
            ),
            import_pattern=re.compile(r"^#\s*include\s*[<\"][^>\"]+[>\"]"),
            variable_pattern=re.compile(
                rf"^{_NOT_A_DECLARATION}(?:(?:const|static|constexpr|auto|unsigned|signed|volatile)\s+)*"
                r"(?P<type>[\w:<>]+[*&]*)\s+[*&]*(?P<name>\w+)\s*(?:=(?!=)\s*(?P<value>[^;]+))?;?$"
            ),
            comment_pattern=re.compile(r"^(?://|/\*|\*)"),
            string_pattern=re.compile(r"^(?:[LuUR]|u8)?\""),
            conditional_pattern=re.compile(r"^(?:if|else\s+if|switch)\s*\(|^else\b"),
            loop_pattern=re.compile(r"^(?:for|while)\s*\(|^do\b"),
            return_pattern=re.compile(r"^return\b"),
            try_catch_pattern=re.compile(r"^(?:try|catch)\b"),
            property_pattern=re.compile(r"^this->(?P<name>\w+)\s*=(?!=)"),
        )
