"""
Состояние лаунчера и правила для порта и статусной строки.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_PORT = 8080
MIN_PORT = 1
MAX_PORT = 65535

STATUS_STOPPED = "Server is stopped."
STATUS_DIRECTORY_SELECTED = "Directory selected. Server is stopped."

SUFFIX_FOUND = " (Previewing index.html)"
SUFFIX_NOT_FOUND = ". No index.html found in the root of the selected directory to preview."
SUFFIX_READ_ERROR = ". Error reading index.html for preview."

_PORT_INPUT = re.compile(r"\d*", re.ASCII)


class Lifecycle(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class PreviewStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class PreviewOutcome:
    status: PreviewStatus
    text: str | None = None

    @classmethod
    def found(cls, text: str) -> "PreviewOutcome":
        return cls(PreviewStatus.FOUND, text)

    @classmethod
    def not_found(cls) -> "PreviewOutcome":
        return cls(PreviewStatus.NOT_FOUND)

    @classmethod
    def read_error(cls) -> "PreviewOutcome":
        return cls(PreviewStatus.READ_ERROR)


@dataclass
class LauncherState:
    directory: Any = None
    port: str = str(DEFAULT_PORT)
    lifecycle: Lifecycle = Lifecycle.STOPPED
    status_message: str = STATUS_STOPPED
    server_url: str = ""
    preview_content: str | None = None
    last_outcome: PreviewOutcome | None = field(default=None, repr=False)

    @property
    def is_running(self) -> bool:
        return self.lifecycle is Lifecycle.RUNNING


def is_port_input(raw: str) -> bool:
    return raw is not None and _PORT_INPUT.fullmatch(raw) is not None


def _port_number(raw: str) -> int | None:
    """Число из строки цифр; None, если значимых цифр больше, чем у MAX_PORT."""
    significant = raw.lstrip("0")
    if len(significant) > len(str(MAX_PORT)):
        return None
    return int(significant or "0")


def accept_port_input(current: str, raw: str) -> str:
    """
    Новое сохраняемое значение порта для ввода raw.
    Принимаются только цифры (или пусто); всё, что больше 65535, становится "65535".
    """
    if not is_port_input(raw):
        return current
    if raw:
        value = _port_number(raw)
        if value is None or value > MAX_PORT:
            return str(MAX_PORT)
    return raw


def effective_port(raw: str) -> tuple[int, bool]:
    """(порт для URL, был ли подставлен порт по умолчанию)."""
    if not raw or not is_port_input(raw):
        return DEFAULT_PORT, True
    value = _port_number(raw)
    if value is None or value < MIN_PORT or value > MAX_PORT:
        return DEFAULT_PORT, True
    return value, False


def server_url_for(port: int) -> str:
    return f"http://localhost:{port}"


def running_status(url: str, outcome: PreviewOutcome) -> str:
    base = f"Server running at {url}"
    if outcome.status is PreviewStatus.FOUND:
        return base + SUFFIX_FOUND
    if outcome.status is PreviewStatus.NOT_FOUND:
        return base + SUFFIX_NOT_FOUND
    return base + SUFFIX_READ_ERROR


def cli_command(directory_name: str, port: str) -> str:
    return f'npx http-server "{directory_name}" -p {port}'
