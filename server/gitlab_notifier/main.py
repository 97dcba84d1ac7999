from __future__ import annotations
"""server/gitlab_notifier/main.py
~~~~~~~~~~~~~~~~~~~~~~~~
Point d'entrée FastAPI.

    uvicorn gitlab_notifier.main:app --port 3000
ou
    gitlab-notifier          (console script → run())
"""
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from gitlab_notifier import __version__
from gitlab_notifier.api.v1.router import api_router
from gitlab_notifier.core.config import get_settings
from gitlab_notifier.core.logging import setup_logging

log = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook/gitlab"

app = FastAPI(title="GitLab Feishu Notifier", version=__version__)


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    # GitLab n'affiche que le corps brut : "unauthorized" plutôt que {"detail": ...}
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.on_event("startup")
async def startup() -> None:
    # Lève une ValidationError si FEISHU_WEBHOOK_URL manque → uvicorn abandonne le démarrage
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    log.info("Server is running on port %s", settings.PORT)
    log.info("GitLab webhook endpoint: http://localhost:%s%s", settings.PORT, WEBHOOK_PATH)
    if settings.GITLAB_SECRET_TOKEN:
        log.info("GitLab token verification enabled")
    if not settings.directory_enabled:
        log.info("Directory lookup disabled, names will not be mentioned")


app.include_router(api_router)


def run() -> None:
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as exc:
        setup_logging()
        log.error("Missing or invalid configuration (FEISHU_WEBHOOK_URL is required): %s", exc)
        sys.exit(1)

    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
