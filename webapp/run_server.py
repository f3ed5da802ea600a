"""
WebApp Server Launcher.
Запускает FastAPI сервер JSON-RPC API.
"""

import uvicorn

from config.settings import settings


def main() -> None:
    uvicorn.run(
        "webapp.api.main:app",
        host="0.0.0.0",
        port=settings.WEBAPP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
