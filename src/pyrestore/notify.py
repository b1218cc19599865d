"""User-facing notification collaborator."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

_logger = logging.getLogger(__name__)


class NotificationCategory(StrEnum):
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class Notifier(Protocol):
    """Anything that can show a short message to the user."""

    def notify(self, category: NotificationCategory, message: str) -> None:
        ...


_LOG_LEVELS: dict[NotificationCategory, int] = {
    NotificationCategory.ERROR: logging.ERROR,
    NotificationCategory.WARNING: logging.WARNING,
    NotificationCategory.INFO: logging.INFO,
    NotificationCategory.SUCCESS: logging.INFO,
}


class LoggingNotifier:
    """Default notifier: writes messages to the ``pyrestore.notify`` logger."""

    def notify(self, category: NotificationCategory, message: str) -> None:
        _logger.log(_LOG_LEVELS.get(category, logging.INFO), "[%s] %s", category, message)


class RecordingNotifier:
    """Notifier that keeps every message, for headless consumers and tests."""

    def __init__(self) -> None:
        self.messages: list[tuple[NotificationCategory, str]] = []

    def notify(self, category: NotificationCategory, message: str) -> None:
        self.messages.append((category, message))

    def clear(self) -> None:
        self.messages.clear()
