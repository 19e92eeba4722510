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

"""Logging setup for the completion package.

Every module logs through ``logging.getLogger(__name__)``. This module
maps the ``log_level`` setting onto the package logger, silences noisy
third-party loggers and keeps a ring buffer of recent records so a
"show logs" view can display diagnostics without interrupting typing.
"""

import logging
import sys
from collections import deque
from typing import Deque, List, Optional, TextIO

PACKAGE_LOGGER = "ai_completion"
LOG_FORMAT = "[%(name)s] [%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at DEBUG/INFO
NOISY_LOGGERS = [
    "httpcore",
    "httpx",
    "asyncio",
]

# Setting value -> logging level; "none" disables package logging
LEVELS = {
    "none": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


class RecentLogHandler(logging.Handler):
    """Keeps the last ``capacity`` formatted records in memory."""

    def __init__(self, capacity: int = 500, level: int = logging.NOTSET):
        super().__init__(level)
        self._records: Deque[str] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._records.append(self.format(record))
        except Exception:
            self.handleError(record)

    def lines(self, limit: Optional[int] = None) -> List[str]:
        """Most recent records, oldest first."""
        records = list(self._records)
        return records[-limit:] if limit else records

    def clear(self) -> None:
        self._records.clear()


_recent_handler: Optional[RecentLogHandler] = None


def resolve_level(log_level: str) -> int:
    """Map a settings level name (or a standard level name) to a number."""
    name = log_level.lower()
    if name in LEVELS:
        return LEVELS[name]
    return getattr(logging, log_level.upper(), logging.INFO)


def configure_logging(
    log_level: str = "info",
    stream: Optional[TextIO] = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        log_level: none/error/warn/info/debug
        stream: Console stream (stderr if None)
        console: Attach a console handler

    Returns:
        The configured package logger
    """
    global _recent_handler

    level = resolve_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if _recent_handler is None:
        _recent_handler = RecentLogHandler()
    _recent_handler.setFormatter(formatter)
    logger.addHandler(_recent_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return logger


def get_recent_logs(limit: Optional[int] = None) -> List[str]:
    """Recent package log lines, oldest first (empty before configuration)."""
    if _recent_handler is None:
        return []
    return _recent_handler.lines(limit)
