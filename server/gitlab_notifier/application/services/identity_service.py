from __future__ import annotations
"""server/gitlab_notifier/application/services/identity_service.py
~~~~~~~~~~~~~~~~~~~~~~~~
Résolution d'identités (nom affiché → identifiant Feishu), best-effort.

Le service de notification ne dépend que du contrat `IdentityResolver` :
    await resolver.resolve(name) -> str | None
Un échec de résolution n'interrompt jamais la composition : on affiche le nom
en clair au lieu d'une mention.
"""
import logging
from typing import Optional, Protocol

from gitlab_notifier.core.config import Settings
from gitlab_notifier.infrastructure.directory.directory_client import DirectoryClient

log = logging.getLogger(__name__)


class IdentityResolver(Protocol):
    async def resolve(self, name: str) -> Optional[str]:
        ...


class NullIdentityResolver:
    """Annuaire non configuré : aucune mention, noms en clair."""

    async def resolve(self, name: str) -> Optional[str]:
        return None


class DirectoryIdentityResolver:
    def __init__(self, client: DirectoryClient):
        self.client = client

    async def resolve(self, name: str) -> Optional[str]:
        try:
            return await self.client.lookup(name)
        except Exception as exc:  # noqa: BLE001
            log.warning("Identity resolution failed for %r: %s", name, exc)
            return None


def build_identity_resolver(settings: Settings) -> IdentityResolver:
    if not settings.directory_enabled:
        return NullIdentityResolver()
    return DirectoryIdentityResolver(DirectoryClient.from_settings(settings))


def mention(name: str, identifier: Optional[str]) -> str:
    """Balise de mention lark_md si l'identifiant est connu, sinon le nom brut."""
    if identifier:
        return f"<at id={identifier}></at>"
    return name
