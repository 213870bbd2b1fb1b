"""
Launch Controller: выбор папки, порт, старт/стоп симулированного сервера.

Реальный сокет не открывается: "running" — это состояние плюс превью index.html.
Все операции выполняются в одном event loop. Каждая операция сдвигает epoch;
результат резолвера, пришедший после смены папки или остановки, отбрасывается.
"""

import logging
from dataclasses import dataclass
from typing import Any

from launcher.control.errors import (
    CapabilityUnavailable,
    NoDirectorySelected,
    SelectionCancelled,
    SelectionFailed,
)
from launcher.control.notifications import NotificationFeed, NotificationLevel, Notifier
from launcher.control.state import (
    STATUS_DIRECTORY_SELECTED,
    STATUS_STOPPED,
    LauncherState,
    Lifecycle,
    PreviewOutcome,
    PreviewStatus,
    accept_port_input,
    cli_command,
    effective_port,
    is_port_input,
    running_status,
    server_url_for,
)
from launcher.filesystem.handles import DirectoryPicker
from launcher.preview.presenter import PreviewPresenter
from launcher.preview.resolver import resolve_preview

logger = logging.getLogger(__name__)

# Единый экземпляр на процесс (ленивая инициализация)
_controller: "LaunchController | None" = None


def get_controller(force_reload: bool = False) -> "LaunchController":
    global _controller
    if _controller is not None and not force_reload:
        return _controller
    if _controller is not None:
        _controller.presenter.close()
    _controller = LaunchController(notifier=NotificationFeed(), presenter=PreviewPresenter())
    return _controller


@dataclass(frozen=True)
class StartResult:
    port: int
    port_defaulted: bool
    outcome: PreviewOutcome
    superseded: bool = False


class LaunchController:
    def __init__(
        self,
        notifier: Notifier | None = None,
        presenter: PreviewPresenter | None = None,
        resolver=resolve_preview,
    ):
        self.notifier = notifier if notifier is not None else NotificationFeed()
        self.presenter = presenter
        self.resolver = resolver
        self.state = LauncherState()
        self._epoch = 0

    async def select_directory(self, picker: DirectoryPicker | None) -> Any:
        if picker is None:
            self.notifier.notify(
                NotificationLevel.ERROR,
                "Browser Not Supported",
                "Directory selection is not available in this environment.",
            )
            raise CapabilityUnavailable()
        try:
            directory = await picker.choose()
        except SelectionCancelled:
            logger.info("Выбор папки отменён")
            raise
        except SelectionFailed as e:
            logger.warning("Не удалось выбрать папку: %s", e.detail)
            self.notifier.notify(NotificationLevel.ERROR, "Error", e.message)
            raise

        self._epoch += 1
        self.state.directory = directory
        self._reset(STATUS_DIRECTORY_SELECTED)
        logger.info("Выбрана папка %s", directory.name)
        self.notifier.notify(
            NotificationLevel.INFO, "Directory Selected", f"Selected directory: {directory.name}"
        )
        return directory

    def set_port(self, raw: str) -> bool:
        self.state.port = accept_port_input(self.state.port, raw)
        return is_port_input(raw)

    async def start(self) -> StartResult:
        directory = self.state.directory
        if directory is None:
            self.notifier.notify(NotificationLevel.ERROR, "Error", NoDirectorySelected.message)
            raise NoDirectorySelected()

        port, defaulted = effective_port(self.state.port)
        if defaulted:
            logger.info("Некорректный порт %r, используется %d", self.state.port, port)
            self.state.port = str(port)
            self.notifier.notify(
                NotificationLevel.WARNING,
                "Port Defaulted",
                f"Invalid port number (1-65535). Using default port {port}.",
            )

        self._epoch += 1
        epoch = self._epoch
        url = server_url_for(port)
        outcome = await self.resolver(directory)

        if epoch != self._epoch or directory is not self.state.directory:
            logger.info("Результат превью для %s устарел, отброшен", directory.name)
            return StartResult(port=port, port_defaulted=defaulted, outcome=outcome, superseded=True)

        self._apply_running(url, outcome)
        if outcome.status is PreviewStatus.READ_ERROR:
            self.notifier.notify(
                NotificationLevel.ERROR, "Preview Error", "Could not read index.html for preview."
            )
        logger.info("Сервер (симуляция) запущен: %s, папка %s", url, directory.name)
        self.notifier.notify(
            NotificationLevel.INFO,
            "Server Started (Simulated)",
            f"Serving from {directory.name} on port {port}.",
        )
        return StartResult(port=port, port_defaulted=defaulted, outcome=outcome)

    def stop(self) -> None:
        self._epoch += 1
        self._reset(STATUS_STOPPED)
        logger.info("Сервер (симуляция) остановлен")
        self.notifier.notify(NotificationLevel.INFO, "Server Stopped (Simulated)")

    def snapshot(self) -> dict:
        state = self.state
        directory_name = state.directory.name if state.directory is not None else None
        return {
            "directory": directory_name,
            "port": state.port,
            "lifecycle": state.lifecycle.value,
            "running": state.is_running,
            "status_message": state.status_message,
            "server_url": state.server_url,
            "has_preview": state.preview_content is not None,
            "preview_notice": self._preview_notice(),
            "cli_command": cli_command(directory_name, state.port)
            if state.is_running and directory_name
            else None,
        }

    def _apply_running(self, url: str, outcome: PreviewOutcome) -> None:
        state = self.state
        state.lifecycle = Lifecycle.RUNNING
        state.server_url = url
        state.last_outcome = outcome
        state.preview_content = outcome.text if outcome.status is PreviewStatus.FOUND else None
        state.status_message = running_status(url, outcome)
        if self.presenter is None:
            return
        try:
            if state.preview_content is not None:
                self.presenter.present(state.preview_content)
            else:
                self.presenter.clear()
        except Exception as e:
            logger.exception("Не удалось показать превью: %s", e)
            state.preview_content = None
            self.notifier.notify(NotificationLevel.ERROR, "Preview Error", "Could not display the preview.")

    def _reset(self, status_message: str) -> None:
        state = self.state
        state.lifecycle = Lifecycle.STOPPED
        state.server_url = ""
        state.preview_content = None
        state.last_outcome = None
        state.status_message = status_message
        if self.presenter is not None:
            self.presenter.clear()

    def _preview_notice(self) -> str | None:
        state = self.state
        if not state.is_running or state.preview_content is not None or state.directory is None:
            return None
        if state.last_outcome is not None and state.last_outcome.status is PreviewStatus.NOT_FOUND:
            reason = "No 'index.html' was found in the root of the selected directory to preview."
        else:
            reason = "An error occurred while trying to load 'index.html' for preview."
        return (
            f"{reason} To serve all files from '{state.directory.name}', "
            "you would typically run a command-line HTTP server."
        )
