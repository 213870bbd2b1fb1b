"""
Показ превью в изолированной поверхности и подгонка высоты контейнера.

На каждый present() берётся новое HeightObservation и освобождается прежнее;
clear() и close() освобождают наблюдение и выгружают поверхность.
"""

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

MIN_PREVIEW_HEIGHT = 300

HeightCallback = Callable[[int], None]


class Subscription(Protocol):
    def cancel(self) -> None:
        ...


class RenderSurface(Protocol):
    @property
    def content_height(self) -> int | None:
        ...

    def load(self, payload: str) -> None:
        ...

    def unload(self) -> None:
        ...

    def subscribe(self, callback: HeightCallback) -> Subscription:
        ...


class _Listener:
    def __init__(self, surface: "SandboxedSurface", callback: HeightCallback):
        self._surface = surface
        self.callback = callback

    def cancel(self) -> None:
        self._surface._listeners.discard(self)


class SandboxedSurface:
    """
    Поверхность внутри процесса: хранит payload, номер ревизии и последнюю
    высоту, о которой сообщил клиент. Сообщения от старых ревизий игнорируются.
    """

    def __init__(self):
        self.payload: str | None = None
        self.revision = 0
        self._height: int | None = None
        self._listeners: set[_Listener] = set()

    @property
    def content_height(self) -> int | None:
        return self._height

    def load(self, payload: str) -> None:
        self.payload = payload
        self.revision += 1
        self._height = None

    def unload(self) -> None:
        self.payload = None
        self.revision += 1
        self._height = None

    def subscribe(self, callback: HeightCallback) -> _Listener:
        listener = _Listener(self, callback)
        self._listeners.add(listener)
        return listener

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def report_height(self, revision: int, height: int) -> bool:
        if self.payload is None or revision != self.revision:
            logger.debug("Высота для устаревшей ревизии %s (текущая %s)", revision, self.revision)
            return False
        self._height = max(0, int(height))
        for listener in list(self._listeners):
            listener.callback(self._height)
        return True


class HeightObservation:
    """Подписка на высоту поверхности; release() идемпотентен."""

    def __init__(self, surface: RenderSurface, on_height: HeightCallback):
        self._surface = surface
        self._on_height = on_height
        self._subscription: Subscription | None = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def attach(self) -> None:
        self._subscription = self._surface.subscribe(self._on_height)
        height = self._surface.content_height
        if height is not None:
            self._on_height(height)

    def release(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()

    def __enter__(self) -> "HeightObservation":
        self.attach()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class PreviewPresenter:
    def __init__(self, surface: RenderSurface | None = None, min_height: int = MIN_PREVIEW_HEIGHT):
        self.surface = surface if surface is not None else SandboxedSurface()
        self.min_height = min_height
        self.height = min_height
        self.content: str | None = None
        self._observation: HeightObservation | None = None
        self._closed = False

    @property
    def observing(self) -> bool:
        return self._observation is not None and self._observation.active

    def present(self, content: str) -> None:
        if self._closed:
            raise RuntimeError("Presenter is closed")
        self.clear()
        self.surface.load(content)
        self.content = content
        observation = HeightObservation(self.surface, self._resize)
        try:
            observation.attach()
        except Exception:
            observation.release()
            self.surface.unload()
            self.content = None
            raise
        self._observation = observation
        logger.debug("Превью показано (%d символов)", len(content))

    def clear(self) -> None:
        observation, self._observation = self._observation, None
        if observation is not None:
            observation.release()
        if self.content is not None:
            self.surface.unload()
            self.content = None
        self.height = self.min_height

    def close(self) -> None:
        self.clear()
        self._closed = True

    def _resize(self, content_height: int) -> None:
        self.height = max(self.min_height, content_height)
