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

"""Language config registry.

Maps editor language identifiers (and their aliases / file extensions)
to LanguageConfig pattern bundles. The registry is populated once when
constructed and is read-only afterwards, so it can be shared freely.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Type, Union

from ai_completion.languages.base import BaseLanguagePlugin, LanguageConfig, LanguagePlugin

logger = logging.getLogger(__name__)

# Type alias for plugin factory
PluginFactory = Callable[[], LanguagePlugin]


class LanguageConfigRegistry:
    """Read-only registry of language configs.

    Provides:
    - Lookup by canonical name or alias (case-insensitive)
    - Language detection from file extensions
    """

    def __init__(self, plugins: Iterable[Union[Type[BaseLanguagePlugin], PluginFactory]]):
        """Build the registry.

        Args:
            plugins: Plugin classes or factories; each is instantiated once.
                A later plugin with the same canonical name replaces an
                earlier one.
        """
        configs: Dict[str, LanguageConfig] = {}
        aliases: Dict[str, str] = {}
        extensions: Dict[str, str] = {}

        for factory in plugins:
            try:
                config = factory().config
            except Exception as e:
                logger.warning(f"Failed to load language plugin {factory!r}: {e}")
                continue

            name = config.name.lower()
            if name in configs:
                logger.warning(f"Overwriting existing language config: {name}")
            configs[name] = config

            for alias in config.aliases:
                aliases[alias.lower()] = name
            for ext in config.extensions:
                ext = ext.lower()
                if not ext.startswith("."):
                    ext = "." + ext
                extensions[ext] = name

            logger.debug(f"Registered language config: {name}")

        self._configs: Mapping[str, LanguageConfig] = MappingProxyType(configs)
        self._alias_map: Mapping[str, str] = MappingProxyType(aliases)
        self._extension_map: Mapping[str, str] = MappingProxyType(extensions)

    @classmethod
    def with_builtin_languages(cls) -> "LanguageConfigRegistry":
        """Create a registry holding every built-in language plugin."""
        from ai_completion.languages.plugins import BUILTIN_PLUGINS

        registry = cls(BUILTIN_PLUGINS)
        logger.info(f"Loaded {len(registry)} language configs")
        return registry

    def lookup(self, language_id: Optional[str]) -> Optional[LanguageConfig]:
        """Get the config for a language identifier.

        Args:
            language_id: Editor language id or alias (e.g., 'python', 'ts')

        Returns:
            The LanguageConfig, or None for unknown languages
        """
        name = self._resolve_name(language_id)
        if name is None:
            return None
        return self._configs[name]

    def has(self, language_id: Optional[str]) -> bool:
        """Check if a language is registered."""
        return self._resolve_name(language_id) is not None

    def detect_language(self, path: Path) -> Optional[str]:
        """Detect the canonical language name from a file path.

        Args:
            path: File path to check

        Returns:
            Language name or None if not detected
        """
        return self._extension_map.get(path.suffix.lower())

    def languages(self) -> List[str]:
        """List all registered language names.

        Returns:
            Sorted list of canonical names
        """
        return sorted(self._configs.keys())

    def _resolve_name(self, language_id: Optional[str]) -> Optional[str]:
        """Resolve alias to canonical name."""
        if not language_id:
            return None
        name = language_id.lower()
        if name in self._configs:
            return name
        return self._alias_map.get(name)

    def __contains__(self, language_id: object) -> bool:
        return isinstance(language_id, str) and self.has(language_id)

    def __len__(self) -> int:
        return len(self._configs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(languages={self.languages()!r})"
