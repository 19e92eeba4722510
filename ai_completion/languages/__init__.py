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

"""Language pattern support.

Each language plugin contributes a LanguageConfig: a bundle of compiled
patterns the context analyzer uses to classify lines and recover
enclosing declarations. The registry maps editor language ids to configs.

Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                 LanguageConfigRegistry                      │
    │      (Maps language ids / aliases / extensions to configs)  │
    └─────────────────────────────────────────────────────────────┘
                              │
          ┌───────────────────┼───────────────────┐
          ▼                   ▼                   ▼
    ┌───────────┐       ┌───────────┐       ┌───────────┐
    │  Python   │       │ JavaScript│       │   Java    │
    │  Plugin   │       │  Plugin   │       │  Plugin   │
    └───────────┘       └───────────┘       └───────────┘

Adding a language means adding one plugin module and listing it in
``plugins.BUILTIN_PLUGINS``.
"""

from ai_completion.languages.base import (
    BaseLanguagePlugin,
    LanguageConfig,
    LanguagePlugin,
    first_group,
)
from ai_completion.languages.registry import LanguageConfigRegistry

__all__ = [
    "BaseLanguagePlugin",
    "LanguageConfig",
    "LanguagePlugin",
    "first_group",
    "LanguageConfigRegistry",
]
