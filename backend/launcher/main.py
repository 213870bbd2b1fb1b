"""
Entrypoint: запуск FastAPI-сервиса лаунчера (uvicorn).
Запуск из папки backend: python -m launcher.main
Production: задайте PORT (и при необходимости RELOAD=0).
"""

import os
import uvicorn


def main() -> None:
    port = int(os.environ.get("PORT", 8000))
    reload = os.environ.get("RELOAD", "1").strip().lower() in ("1", "true", "yes")
    uvicorn.run(
        "launcher.api.app:app",
        host="127.0.0.1",
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
