"""
Доступ к выбранной папке через непрозрачный handle: имя, перечисление
непосредственных детей и чтение одного файла как текста.
Ядро работает только с этим интерфейсом, а не с конкретной ФС.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Protocol

from launcher.config import ALLOW_DIRECTORY_SELECTION, BROWSE_ROOT, MAX_PREVIEW_BYTES
from launcher.control.errors import SelectionCancelled, SelectionFailed

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    kind: EntryKind
    handle: Any


class DirectoryReference(Protocol):
    @property
    def name(self) -> str:
        ...

    def iter_children(self) -> AsyncIterator[DirectoryEntry]:
        ...

    async def read_text(self, handle: Any) -> str:
        ...


class DirectoryPicker(Protocol):
    async def choose(self) -> DirectoryReference:
        """Возвращает выбранную папку или бросает SelectionCancelled / SelectionFailed."""
        ...


class PreviewTooLarge(OSError):
    pass


class LocalDirectory:
    """Папка на локальном диске. Блокирующий I/O уходит в поток."""

    def __init__(self, path: str | Path, max_file_bytes: int = MAX_PREVIEW_BYTES):
        self.path = Path(path)
        self.max_file_bytes = max_file_bytes

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    async def iter_children(self) -> AsyncIterator[DirectoryEntry]:
        entries = await asyncio.to_thread(self._scan)
        for entry in entries:
            yield entry

    def _scan(self) -> list[DirectoryEntry]:
        result = []
        with os.scandir(self.path) as it:
            for item in it:
                if item.is_dir():
                    kind = EntryKind.DIRECTORY
                elif item.is_file():
                    kind = EntryKind.FILE
                else:
                    continue
                result.append(DirectoryEntry(name=item.name, kind=kind, handle=Path(item.path)))
        logger.debug("scan %s: %d entries", self.path, len(result))
        return result

    async def read_text(self, handle: Path) -> str:
        return await asyncio.to_thread(self._read, Path(handle))

    def _read(self, path: Path) -> str:
        size = path.stat().st_size
        if size > self.max_file_bytes:
            raise PreviewTooLarge(
                f"Файл слишком большой для превью (макс. {self.max_file_bytes // (1024*1024)} MB): {path.name}"
            )
        return path.read_text(encoding="utf-8", errors="replace")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalDirectory) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"LocalDirectory({str(self.path)!r})"


class LocalPathPicker:
    """
    "Выбор" папки по пути, пришедшему от клиента.
    Пустой путь означает, что пользователь закрыл диалог.
    """

    def __init__(self, path: str | None, root: Path | None = BROWSE_ROOT):
        self.raw_path = path
        self.root = root

    async def choose(self) -> LocalDirectory:
        if self.raw_path is None or not self.raw_path.strip():
            raise SelectionCancelled()
        path = Path(self.raw_path.strip()).expanduser()
        try:
            resolved = await asyncio.to_thread(path.resolve, True)
        except (OSError, RuntimeError) as e:
            raise SelectionFailed(detail=str(e)) from e
        if not resolved.is_dir():
            raise SelectionFailed(detail=f"Not a directory: {self.raw_path}")
        if self.root is not None and not resolved.is_relative_to(self.root):
            raise SelectionFailed(detail=f"Directory is outside of {self.root}")
        return LocalDirectory(resolved)


def local_picker(path: str | None) -> LocalPathPicker | None:
    """Picker для текущего окружения; None, если выбор папки отключён."""
    if not ALLOW_DIRECTORY_SELECTION:
        return None
    return LocalPathPicker(path)
