from __future__ import annotations

"""server/gitlab_notifier/application/services/card_builder.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Construction des cartes Feishu à partir des événements GitLab :

- merge request ouverte : titre (préfixe "Draft: "), couleur, champs, description,
  bouton vers la MR
- pipeline terminé : statut ✅/❌, durée, déclencheur, bouton vers le pipeline

Fonctions pures : les identités sont résolues en amont (notification_service)
et passées sous forme de couples (nom, identifiant | None).
"""

import logging
from typing import Optional, Sequence

from gitlab_notifier.api.schemas.gitlab import MergeRequestEvent, PipelineEvent
from gitlab_notifier.application.services.identity_service import mention
from gitlab_notifier.core.utils.datetime import elapsed_seconds, parse_timestamp
from gitlab_notifier.domain.cards import CardAction, CardColor, NotificationCard

logger = logging.getLogger(__name__)

PROTECTED_TARGET_BRANCHES = frozenset({"main", "master"})

DRAFT_PREFIX = "Draft: "
NO_COMMIT_INFO = "no commit info"
NO_DESCRIPTION = "no description"
UNKNOWN_DURATION = "unknown"

STATUS_DISPLAY = {
    "success": ("Success ✅", CardColor.GREEN),
    "failed": ("Failed ❌", CardColor.RED),
}

__all__ = [
    "build_merge_request_card",
    "build_pipeline_card",
    "merge_request_color",
    "pipeline_duration",
]


# ──────────────────────────────────────────────────────────────────────────────
# Merge request
# ──────────────────────────────────────────────────────────────────────────────

def merge_request_color(is_draft: bool, target_branch: Optional[str]) -> CardColor:
    """Brouillon d'abord (vert), puis cible protégée (rouge), sinon bleu."""
    if is_draft:
        return CardColor.GREEN
    if target_branch in PROTECTED_TARGET_BRANCHES:
        return CardColor.RED
    return CardColor.BLUE


def _first_line(message: Optional[str]) -> str:
    if not message:
        return NO_COMMIT_INFO
    return message.split("\n")[0]


def build_merge_request_card(
    event: MergeRequestEvent,
    assignees: Sequence[tuple[str, Optional[str]]],
) -> NotificationCard:
    mr = event.object_attributes
    project_name = event.project.name or ""
    last_commit = mr.last_commit

    title = f"{project_name} - {DRAFT_PREFIX if mr.is_draft else ''}New merge request #{mr.iid}"
    fields = (
        ("Project", project_name),
        ("Title", mr.title or ""),
        ("Creator", event.user.display_name),
        ("Assignees", ", ".join(mention(name, ident) for name, ident in assignees)),
        ("Source branch", mr.source_branch or ""),
        ("Target branch", mr.target_branch or ""),
        ("Latest commit", _first_line(last_commit.message if last_commit else None)),
    )
    return NotificationCard(
        title=title,
        template=merge_request_color(mr.is_draft, mr.target_branch),
        fields=fields,
        note=mr.description or NO_DESCRIPTION,
        action=CardAction(text="View merge request", url=mr.url or ""),
    )


# ──────────────────────────────────────────────────────────────────────────────
# Pipeline
# ──────────────────────────────────────────────────────────────────────────────

def pipeline_duration(event: PipelineEvent) -> Optional[int]:
    """
    Durée en secondes entières : floor(finished_at - created_at).
    - négative → 0 (horloges incohérentes côté GitLab)
    - horodatage manquant/illisible → champ `duration` du payload, sinon None
    """
    attrs = event.object_attributes
    seconds = elapsed_seconds(parse_timestamp(attrs.created_at), parse_timestamp(attrs.finished_at))
    if seconds is None:
        if attrs.duration is None:
            return None
        seconds = int(attrs.duration)
    if seconds < 0:
        logger.warning("Pipeline #%s: negative duration (%ss), clamped to 0", attrs.id, seconds)
        return 0
    return seconds


def build_pipeline_card(event: PipelineEvent, triggered_by: Optional[str]) -> NotificationCard:
    attrs = event.object_attributes
    project_name = event.project.name or ""
    status_display, color = STATUS_DISPLAY[(attrs.status or "").strip().lower()]

    duration = pipeline_duration(event)
    fields = (
        ("Project", project_name),
        ("Branch", attrs.ref or ""),
        ("Status", status_display),
        ("Triggered by", mention(event.user.display_name, triggered_by)),
        ("Duration (s)", str(duration) if duration is not None else UNKNOWN_DURATION),
    )
    web_url = (event.project.web_url or "").rstrip("/")
    return NotificationCard(
        title=f"{project_name} - Pipeline #{attrs.id} {status_display}",
        template=color,
        fields=fields,
        action=CardAction(text="View pipeline", url=f"{web_url}/-/pipelines/{attrs.id}"),
    )
