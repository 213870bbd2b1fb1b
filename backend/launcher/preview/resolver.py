"""
Поиск index.html в корне выбранной папки (без учёта регистра) и чтение его текста.
Любой сбой доступа превращается в PreviewOutcome.read_error(), а не в исключение.
"""

import logging

from launcher.control.state import PreviewOutcome
from launcher.filesystem.handles import DirectoryReference, EntryKind

logger = logging.getLogger(__name__)

PREVIEW_FILENAME = "index.html"


async def resolve_preview(directory: DirectoryReference) -> PreviewOutcome:
    try:
        async for entry in directory.iter_children():
            if entry.kind != EntryKind.FILE or entry.name.lower() != PREVIEW_FILENAME:
                continue
            logger.debug("Найден %s в %s", entry.name, directory.name)
            text = await directory.read_text(entry.handle)
            return PreviewOutcome.found(text)
    except Exception as e:
        logger.exception("Ошибка чтения index.html в %s: %s", getattr(directory, "name", "?"), e)
        return PreviewOutcome.read_error()
    return PreviewOutcome.not_found()
