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

"""Token usage accounting.

TokenCounter is the usage sink the orchestrator reports to after every
successful backend response. Counts can optionally be persisted to a
small JSON file so they survive restarts.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_COST_PER_1K_TOKENS = 0.002


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TokenStats:
    """Cumulative token usage since the last reset."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    request_count: int = 0
    last_reset: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["last_reset"] = self.last_reset.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenStats":
        last_reset = datetime.fromisoformat(data["last_reset"]) if "last_reset" in data else _utcnow()
        if last_reset.tzinfo is None:
            last_reset = last_reset.replace(tzinfo=timezone.utc)
        return cls(
            input_tokens=int(data.get("input_tokens", 0)),
            output_tokens=int(data.get("output_tokens", 0)),
            total_tokens=int(data.get("total_tokens", 0)),
            request_count=int(data.get("request_count", 0)),
            last_reset=last_reset,
        )


@dataclass
class UsageInfo:
    """Derived usage figures."""

    total_cost: float
    average_tokens_per_request: int
    days_since_reset: int


def format_tokens(tokens: int) -> str:
    """Format a token count as 950, 1.2K or 3.4M."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


def estimate_tokens(text: str) -> int:
    """Rough token estimate: about four characters per token."""
    if not text:
        return 0
    return math.ceil(len(text) / 4)


class TokenCounter:
    """Cumulative token counter.

    Example:
        counter = TokenCounter()
        counter.add_tokens(120, 40)
        print(counter.formatted_stats())
    """

    def __init__(
        self,
        state_path: Optional[Path] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the counter.

        Args:
            state_path: JSON file to load from and save to (no persistence if None)
            clock: Time source (injectable for tests)
        """
        self._state_path = state_path
        self._clock = clock
        self._stats = self._load() or TokenStats(last_reset=clock())

    def add_tokens(self, input_tokens: int, output_tokens: int) -> None:
        """Record one backend response's token usage."""
        self._stats.input_tokens += input_tokens
        self._stats.output_tokens += output_tokens
        self._stats.total_tokens += input_tokens + output_tokens
        self._stats.request_count += 1
        self._save()

    @property
    def stats(self) -> TokenStats:
        """Copy of the current statistics."""
        return TokenStats(**asdict(self._stats))

    def reset(self) -> None:
        """Zero all counters and restart the reset clock."""
        self._stats = TokenStats(last_reset=self._clock())
        self._save()
        logger.info("Token usage statistics reset")

    def formatted_stats(self) -> str:
        s = self._stats
        return (
            f"Requests: {s.request_count} | Input: {format_tokens(s.input_tokens)} | "
            f"Output: {format_tokens(s.output_tokens)} | Total: {format_tokens(s.total_tokens)}"
        )

    def usage_info(self, cost_per_1k: float = DEFAULT_COST_PER_1K_TOKENS) -> UsageInfo:
        """Estimated cost and averages since the last reset."""
        s = self._stats
        average = round(s.total_tokens / s.request_count) if s.request_count else 0
        return UsageInfo(
            total_cost=round(s.total_tokens / 1000 * cost_per_1k, 4),
            average_tokens_per_request=average,
            days_since_reset=(self._clock() - s.last_reset).days,
        )

    def estimate_tokens(self, text: str) -> int:
        return estimate_tokens(text)

    def _load(self) -> Optional[TokenStats]:
        if self._state_path is None or not self._state_path.exists():
            return None
        try:
            data = json.loads(self._state_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return TokenStats.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load token stats from {self._state_path}: {e}")
            return None

    def _save(self) -> None:
        if self._state_path is None:
            return
        try:
            self._state_path.parent.mkdir(parents=True, exist_ok=True)
            self._state_path.write_text(json.dumps(self._stats.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to save token stats to {self._state_path}: {e}")
