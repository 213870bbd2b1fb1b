"""
Ошибки лаунчера. Каждая несёт машинный код и сообщение для пользователя,
которые API отдаёт в конверте ErrorResponse.
"""


class LauncherError(Exception):
    code = "LAUNCHER_ERROR"
    message = "Launcher error."

    def __init__(self, message: str | None = None, detail=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.detail = detail


class CapabilityUnavailable(LauncherError):
    code = "CAPABILITY_UNAVAILABLE"
    message = "Directory selection is not supported in this environment."


class SelectionCancelled(LauncherError):
    """Пользователь закрыл выбор папки. Не ошибка: ничего не показываем."""

    code = "SELECTION_CANCELLED"
    message = "Directory selection was cancelled."


class SelectionFailed(LauncherError):
    code = "SELECTION_FAILED"
    message = "Could not select directory."


class NoDirectorySelected(LauncherError):
    code = "NO_DIRECTORY_SELECTED"
    message = "Please select a directory first."
