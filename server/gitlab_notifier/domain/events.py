# server/gitlab_notifier/domain/events.py

from __future__ import annotations
"""
Classification des webhooks GitLab.

Fonction principale :
    classify(event_kind, body) -> EventRoute | None
Décide, à partir du header X-Gitlab-Event et des champs action/status, quel
handler déclencher. Aucun appel réseau ici.
"""

from enum import Enum
from typing import Any, Optional

from gitlab_notifier.core.errors import MalformedEventError

MERGE_REQUEST_HOOK = "Merge Request Hook"
PIPELINE_HOOK = "Pipeline Hook"
HANDLED_KINDS = frozenset({MERGE_REQUEST_HOOK, PIPELINE_HOOK})

# GitLab envoie "open" ; "opened" toléré (variante observée côté intégrations)
MR_OPEN_ACTIONS = frozenset({"open", "opened"})
PIPELINE_TERMINAL_STATUSES = frozenset({"success", "failed"})


class EventRoute(str, Enum):
    MERGE_REQUEST_OPENED = "merge_request_opened"
    PIPELINE_COMPLETED = "pipeline_completed"


def _attributes(body: Any) -> dict:
    """Retourne object_attributes (dict vide si absent) ; lève si le corps est incohérent."""
    if not isinstance(body, dict):
        raise MalformedEventError(f"webhook body must be a JSON object, got {type(body).__name__}")
    attrs = body.get("object_attributes")
    if attrs is None:
        return {}
    if not isinstance(attrs, dict):
        raise MalformedEventError("object_attributes must be a JSON object")
    return attrs


def _norm(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def classify(event_kind: Optional[str], body: Any) -> Optional[EventRoute]:
    """
    - Merge Request Hook + action open/opened → MERGE_REQUEST_OPENED
    - Pipeline Hook + status success/failed   → PIPELINE_COMPLETED
    - tout le reste (autres actions, statuts non terminaux, kinds inconnus) → None
    """
    kind = (event_kind or "").strip()

    if kind == MERGE_REQUEST_HOOK:
        if _norm(_attributes(body).get("action")) in MR_OPEN_ACTIONS:
            return EventRoute.MERGE_REQUEST_OPENED
        return None

    if kind == PIPELINE_HOOK:
        if _norm(_attributes(body).get("status")) in PIPELINE_TERMINAL_STATUSES:
            return EventRoute.PIPELINE_COMPLETED
        return None

    return None
