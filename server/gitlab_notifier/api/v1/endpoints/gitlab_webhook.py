from __future__ import annotations
"""
server/gitlab_notifier/api/v1/endpoints/gitlab_webhook.py
~~~~~~~~~~~~~~~~~~~~~~~~
POST /webhook/gitlab — réception des webhooks GitLab.

Notes :
- Secret X-Gitlab-Token vérifié en amont (dépendance gitlab_token_auth → 401).
- Kinds non gérés (ou header absent) : 200 sans même lire le corps.
- Classification synchrone : une erreur ici (corps non JSON, object_attributes
  incohérent) renvoie 500. Corps vide → {}.
- Résolution d'identités + envoi Feishu en tâche de fond : la réponse à GitLab
  ne dépend jamais de la livraison (200 dès que la classification passe, y
  compris pour les événements ignorés).
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from gitlab_notifier.api.deps import get_notification_service
from gitlab_notifier.api.schemas.gitlab import MergeRequestEvent, PipelineEvent
from gitlab_notifier.application.services.notification_service import NotificationService
from gitlab_notifier.core.security import gitlab_token_auth
from gitlab_notifier.domain.events import HANDLED_KINDS, EventRoute, classify

log = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook")

EVENT_MODELS = {
    EventRoute.MERGE_REQUEST_OPENED: MergeRequestEvent,
    EventRoute.PIPELINE_COMPLETED: PipelineEvent,
}

ACK_MESSAGE = "Webhook received successfully"
ERROR_MESSAGE = "Error processing webhook"


@router.post("/gitlab", response_class=PlainTextResponse, dependencies=[Depends(gitlab_token_auth)])
async def gitlab_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_gitlab_event: Optional[str] = Header(default=None, alias="X-Gitlab-Event"),
    service: NotificationService = Depends(get_notification_service),
) -> PlainTextResponse:
    if (x_gitlab_event or "").strip() not in HANDLED_KINDS:
        log.debug("Ignoring GitLab event %r", x_gitlab_event)
        return PlainTextResponse(ACK_MESSAGE, status_code=200)

    try:
        body = await request.json() if (await request.body()).strip() else {}
        route = classify(x_gitlab_event, body)
        if route is None:
            log.debug("Ignoring GitLab event %r", x_gitlab_event)
        else:
            event = EVENT_MODELS[route].model_validate(body)
            background_tasks.add_task(service.dispatch, route, event)
    except Exception:
        log.exception("Error processing webhook")
        return PlainTextResponse(ERROR_MESSAGE, status_code=500)

    return PlainTextResponse(ACK_MESSAGE, status_code=200)
