"""
Абстрактные уведомления (Info / Warning / Error) для слоя представления.
Лаунчер только публикует события; показывает их клиент.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from launcher.config import NOTIFICATION_HISTORY

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    sequence: int
    level: NotificationLevel
    title: str
    description: str = ""


class Notifier(Protocol):
    def notify(self, level: NotificationLevel, title: str, description: str = "") -> None:
        ...


_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class NotificationFeed:
    """Хранит последние N уведомлений; клиент забирает их по sequence."""

    def __init__(self, history: int = NOTIFICATION_HISTORY):
        self._items: deque[Notification] = deque(maxlen=max(1, history))
        self._sequence = 0

    def notify(self, level: NotificationLevel, title: str, description: str = "") -> None:
        self._sequence += 1
        item = Notification(
            sequence=self._sequence,
            level=NotificationLevel(level),
            title=title,
            description=description,
        )
        self._items.append(item)
        logger.log(_LOG_LEVELS[item.level], "Уведомление [%s] %s: %s", item.level.value, title, description)

    def recent(self, after: int = 0) -> list[Notification]:
        return [n for n in self._items if n.sequence > after]

    @property
    def last_sequence(self) -> int:
        return self._sequence
