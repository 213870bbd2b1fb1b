import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import HTTPException as FastAPIHTTPException

from launcher.control.errors import LauncherError
from .routes import SERVICE_VERSION, ErrorDetail, ErrorResponse, router

logger = logging.getLogger(__name__)

# Код ошибки лаунчера -> HTTP-статус; остальные коды отдаются как 400
LAUNCHER_ERROR_STATUS = {
    "CAPABILITY_UNAVAILABLE": 501,
    "SELECTION_FAILED": 400,
    "NO_DIRECTORY_SELECTED": 409,
}

app = FastAPI(
    title="Localhost Launcher",
    description="Симуляция локального статического HTTP-сервера: выбор папки и порта, старт/стоп, превью index.html.",
    version=SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


def _error_json(status_code: int, code: str, message: str, detail=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(LauncherError)
async def launcher_error_handler(request: Request, exc: LauncherError):
    status_code = LAUNCHER_ERROR_STATUS.get(exc.code, 400)
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, exc.code)
    return _error_json(status_code, exc.code, exc.message, exc.detail)


@app.exception_handler(FastAPIHTTPException)
async def http_exception_handler(request: Request, exc: FastAPIHTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and {"code", "message"} <= detail.keys():
        return _error_json(exc.status_code, detail["code"], detail["message"], detail.get("detail"))
    return _error_json(exc.status_code, "HTTP_ERROR", str(detail or "Request error"))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Необработанное исключение в %s %s", request.method, request.url.path)
    return _error_json(500, "INTERNAL_ERROR", "Internal error. Please try again.", str(exc))


app.include_router(router, prefix="", tags=["launcher"])


@app.get("/")
def root():
    return {
        "service": "Localhost Launcher",
        "docs": "/docs",
        "health": "/health",
        "endpoints": [
            "GET /state",
            "POST /directory",
            "PUT /port",
            "POST /start",
            "POST /stop",
            "GET /notifications",
            "GET /preview",
            "POST /preview/height",
            "GET /health",
        ],
    }
