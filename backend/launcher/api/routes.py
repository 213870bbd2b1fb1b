import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from launcher.control.errors import SelectionCancelled

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "localhost-launcher"
SERVICE_VERSION = "1.0.0"


class SelectDirectoryRequest(BaseModel):
    path: str | None = Field(None, description="Путь к папке; пусто — выбор отменён")


class SetPortRequest(BaseModel):
    value: str = Field(..., description="Сырой ввод порта (только цифры или пусто)")


class PreviewHeightRequest(BaseModel):
    revision: int = Field(..., description="Ревизия поверхности, для которой измерена высота")
    height: int = Field(..., ge=0, description="Высота документа превью в пикселях")


class LauncherStateResponse(BaseModel):
    directory: str | None = Field(None, description="Имя выбранной папки")
    port: str = Field(..., description="Сохранённое значение порта")
    lifecycle: str = Field(..., description="stopped | running")
    running: bool = False
    status_message: str = Field(..., description="Статусная строка")
    server_url: str = Field("", description="URL симулированного сервера (только для отображения)")
    has_preview: bool = False
    preview_notice: str | None = Field(None, description="Почему превью нет (если сервер запущен без него)")
    cli_command: str | None = Field(None, description="Эквивалентная команда CLI (информативно)")


class SelectDirectoryResponse(BaseModel):
    success: bool = True
    cancelled: bool = False
    state: LauncherStateResponse


class SetPortResponse(BaseModel):
    success: bool = True
    accepted: bool = Field(..., description="Принят ли ввод")
    state: LauncherStateResponse


class StartResponse(BaseModel):
    success: bool = True
    port: int = Field(..., description="Фактический порт")
    port_defaulted: bool = Field(False, description="Подставлен порт по умолчанию 8080")
    preview: str = Field(..., description="found | not_found | read_error")
    superseded: bool = Field(False, description="Результат устарел и не применён")
    state: LauncherStateResponse


class NotificationItem(BaseModel):
    sequence: int
    level: str
    title: str
    description: str = ""


class NotificationsResponse(BaseModel):
    notifications: list[NotificationItem]
    last_sequence: int


class PreviewHeightResponse(BaseModel):
    accepted: bool
    height: int = Field(..., description="Текущая высота контейнера превью")


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = SERVICE_NAME
    version: str | None = None


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Код ошибки")
    message: str = Field(..., description="Сообщение для пользователя")
    detail: Any = Field(None, description="Технические детали (опционально)")


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail = Field(..., description="Данные об ошибке")


def _get_controller():
    from launcher.control.controller import get_controller
    return get_controller()


def _get_picker(path: str | None):
    from launcher.filesystem.handles import local_picker
    return local_picker(path)


def _state(controller) -> LauncherStateResponse:
    return LauncherStateResponse(**controller.snapshot())


@router.get("/health", response_model=HealthResponse)
def health():
    """Проверка доступности сервиса."""
    return HealthResponse(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)


@router.get("/state", response_model=LauncherStateResponse)
async def get_state():
    return _state(_get_controller())


@router.post("/directory", response_model=SelectDirectoryResponse)
async def select_directory(body: SelectDirectoryRequest):
    """Выбор папки. Отмена выбора — не ошибка: состояние не меняется."""
    controller = _get_controller()
    try:
        await controller.select_directory(_get_picker(body.path))
    except SelectionCancelled:
        return SelectDirectoryResponse(success=True, cancelled=True, state=_state(controller))
    return SelectDirectoryResponse(success=True, cancelled=False, state=_state(controller))


@router.put("/port", response_model=SetPortResponse)
async def set_port(body: SetPortRequest):
    controller = _get_controller()
    accepted = controller.set_port(body.value)
    return SetPortResponse(success=True, accepted=accepted, state=_state(controller))


@router.post("/start", response_model=StartResponse)
async def start():
    controller = _get_controller()
    result = await controller.start()
    return StartResponse(
        success = True,
        port = result.port,
        port_defaulted = result.port_defaulted,
        preview = result.outcome.status.value,
        superseded = result.superseded,
        state = _state(controller),
    )


@router.post("/stop", response_model=LauncherStateResponse)
async def stop():
    controller = _get_controller()
    controller.stop()
    return _state(controller)


@router.get("/notifications", response_model=NotificationsResponse)
async def notifications(after: int = Query(0, ge=0, description="Только уведомления с sequence > after")):
    feed = _get_controller().notifier
    items = [
        NotificationItem(sequence=n.sequence, level=n.level.value, title=n.title, description=n.description)
        for n in feed.recent(after)
    ]
    return NotificationsResponse(notifications=items, last_sequence=feed.last_sequence)


@router.get("/preview", response_class=HTMLResponse)
async def preview():
    """Изолированная страница превью index.html."""
    from launcher.preview.page import render_preview_page

    presenter = _get_controller().presenter
    if presenter is None or presenter.content is None:
        raise HTTPException(
            status_code = 404,
            detail = ErrorDetail(
                code = "NO_PREVIEW",
                message = "No preview is available. Start the server with an index.html in the selected directory.",
                detail = None,
            ).model_dump(),
        )
    html = render_preview_page(
        presenter.content,
        revision = presenter.surface.revision,
        height = presenter.height,
        min_height = presenter.min_height,
    )
    return HTMLResponse(content=html)


@router.post("/preview/height", response_model=PreviewHeightResponse)
async def preview_height(body: PreviewHeightRequest):
    presenter = _get_controller().presenter
    if presenter is None:
        return PreviewHeightResponse(accepted=False, height=0)
    accepted = presenter.surface.report_height(body.revision, body.height)
    return PreviewHeightResponse(accepted=accepted, height=presenter.height)
