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

"""Per-key request debouncing on the asyncio event loop.

Each key owns at most one pending task. Scheduling a key again cancels
the pending task and starts a new delay, so rapid retriggers collapse
into a single execution of the most recent callback.

A task leaves the table as soon as its delay elapses, before it runs the
callback. Work that has started is therefore never cancelled by a newer
scheduling; the newer one simply gets a fresh task of its own.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestDebouncer:
    """Delayed-execution table with cancel-and-replace semantics.

    Attributes:
        delay: Default debounce delay in seconds (default 0.5s)
    """

    def __init__(self, delay: float = 0.5):
        """Initialize the debouncer.

        Args:
            delay: Default debounce delay in seconds
        """
        self.delay = delay
        self._tasks: dict[str, asyncio.Task] = {}

    def schedule(
        self,
        key: str,
        callback: Callable[[], Awaitable[T]],
        delay: Optional[float] = None,
    ) -> "asyncio.Task[T]":
        """Schedule a debounced callback.

        If a callback is still waiting for this key, it is cancelled and
        replaced. Must be called from a running event loop.

        Args:
            key: Unique key for this callback
            callback: Coroutine function invoked after the delay
            delay: Delay in seconds (defaults to ``self.delay``)

        Returns:
            Task resolving to the callback's result; cancelled if superseded
        """
        previous = self._tasks.pop(key, None)
        if previous is not None and not previous.done():
            previous.cancel()
            logger.debug(f"Superseded pending request for '{key}'")

        wait = self.delay if delay is None else delay
        task = asyncio.get_running_loop().create_task(self._run(key, callback, wait))
        self._tasks[key] = task
        return task

    async def _run(self, key: str, callback: Callable[[], Awaitable[T]], delay: float) -> T:
        await asyncio.sleep(delay)
        # Leave the table before running so a newer scheduling cannot cancel
        # work that is already in flight.
        if self._tasks.get(key) is asyncio.current_task():
            del self._tasks[key]
        return await callback()

    def cancel(self, key: str) -> bool:
        """Cancel a pending callback.

        Returns:
            True if a pending callback was cancelled
        """
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending callback.

        Returns:
            Number of callbacks cancelled
        """
        count = 0
        for key in list(self._tasks):
            if self.cancel(key):
                count += 1
        if count:
            logger.debug(f"Cancelled {count} pending requests")
        return count

    def is_pending(self, key: str) -> bool:
        """Check if a callback is waiting for this key."""
        task = self._tasks.get(key)
        return task is not None and not task.done()

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def __len__(self) -> int:
        return self.pending_count
