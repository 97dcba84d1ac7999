from __future__ import annotations
"""server/gitlab_notifier/application/services/notification_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Notifications GitLab → Feishu.

Pour chaque événement retenu par le classifieur :
  résolution des identités (séquentielle, une par nom) → carte → envoi Feishu.

Toute erreur ici (annuaire, envoi) est loggée puis avalée : GitLab reçoit
toujours son 200, on ne veut pas de tempête de retries pour un souci de
livraison qu'il ne peut pas corriger.
"""
import logging
from typing import Any, Optional, Union

from gitlab_notifier.api.schemas.gitlab import GitlabUser, MergeRequestEvent, PipelineEvent
from gitlab_notifier.application.services.card_builder import (
    build_merge_request_card,
    build_pipeline_card,
)
from gitlab_notifier.application.services.identity_service import (
    IdentityResolver,
    build_identity_resolver,
)
from gitlab_notifier.core.config import Settings
from gitlab_notifier.domain.cards import NotificationCard
from gitlab_notifier.domain.events import EventRoute
from gitlab_notifier.infrastructure.notifications.providers.feishu_provider import FeishuProvider

log = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, resolver: IdentityResolver, provider: FeishuProvider):
        self.resolver = resolver
        self.provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationService":
        return cls(
            build_identity_resolver(settings),
            FeishuProvider(settings.FEISHU_WEBHOOK_URL, timeout=settings.HTTP_TIMEOUT_SECONDS),
        )

    async def _resolve(self, user: GitlabUser) -> Optional[str]:
        # Sans nom réel, pas de lookup : le placeholder "unknown" n'est pas un nom
        if user.lookup_name is None:
            return None
        return await self.resolver.resolve(user.lookup_name)

    async def _deliver(self, card: NotificationCard) -> Any:
        return await self.provider.send(card.to_payload())

    async def handle_merge_request_opened(self, event: MergeRequestEvent) -> Optional[NotificationCard]:
        """Retourne la carte envoyée, ou None si rien n'a été envoyé."""
        try:
            mr = event.object_attributes
            assignees = event.assignees or []
            if not assignees:
                log.info("No assignees for merge request #%s, skipping notification", mr.iid)
                return None

            resolved: list[tuple[str, Optional[str]]] = []
            for assignee in assignees:
                resolved.append((assignee.display_name, await self._resolve(assignee)))

            card = build_merge_request_card(event, resolved)
            await self._deliver(card)
            log.info(
                "Notification sent to %s for merge request #%s",
                ", ".join(name for name, _ in resolved),
                mr.iid,
            )
            return card
        except Exception:
            log.exception("Error handling merge request")
            return None

    async def handle_pipeline_completed(self, event: PipelineEvent) -> Optional[NotificationCard]:
        try:
            attrs = event.object_attributes
            user_id = await self._resolve(event.user)
            card = build_pipeline_card(event, user_id)
            await self._deliver(card)
            log.info("Notification sent for pipeline #%s (%s)", attrs.id, attrs.status)
            return card
        except Exception:
            log.exception("Error handling pipeline")
            return None

    async def dispatch(
        self,
        route: EventRoute,
        event: Union[MergeRequestEvent, PipelineEvent],
    ) -> Optional[NotificationCard]:
        if route is EventRoute.MERGE_REQUEST_OPENED:
            return await self.handle_merge_request_opened(event)  # type: ignore[arg-type]
        if route is EventRoute.PIPELINE_COMPLETED:
            return await self.handle_pipeline_completed(event)  # type: ignore[arg-type]
        log.warning("No handler for route %s", route)
        return None
