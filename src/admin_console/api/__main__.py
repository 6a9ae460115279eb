"""
admin_console.api.__main__

Entrypoint for running the FastAPI application via `python -m admin_console.api`.

Responsibilities:
- Load settings and create the app.
- Start uvicorn without its own logging config (structlog owns stdout).
"""

from __future__ import annotations

import uvicorn

from admin_console.api.app import create_app
from admin_console.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
