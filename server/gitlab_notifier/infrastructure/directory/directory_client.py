from __future__ import annotations

"""server/gitlab_notifier/infrastructure/directory/directory_client.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Client de l'annuaire : nom affiché → identifiant Feishu (pour les @mentions).

- Un GET par nom : `data_source_code` + `keyword_value`, token Bearer,
  User-Agent et Host fixés par la configuration.
- Réponse attendue : {"code": <found_code>, "data": [{"value": "<id>"}, ...]}
  → on ne consomme que data[0]["value"].
- Best-effort : introuvable / erreur réseau / réponse illisible → None (loggé).
  Jamais d'exception vers l'appelant, pas de cache, pas de retry.

Notes :
- On expose **http_get(...)** au niveau module pour que les tests puissent le
  monkeypatcher (pas d'appel réseau en unit).
"""

import logging
from typing import Any, Optional

import httpx

from gitlab_notifier.core.config import Settings

logger = logging.getLogger(__name__)

RESULT_LIST_KEY = "data"
RESULT_VALUE_KEY = "value"
STATUS_CODE_KEY = "code"

__all__ = ["DirectoryClient", "http_get"]


async def http_get(url: str, *, params: dict, headers: dict, timeout: float) -> httpx.Response:
    """GET asynchrone ; conçu pour être *monkeypatché* dans les tests."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.get(url, params=params, headers=headers)


class DirectoryClient:
    def __init__(
        self,
        url: str,
        *,
        data_source_code: str = "",
        token: Optional[str] = None,
        user_agent: Optional[str] = None,
        host: Optional[str] = None,
        found_code: int = 0,
        timeout: float = 10.0,
    ):
        if not url:
            raise ValueError("Directory lookup URL must be provided")
        self.url = url
        self.data_source_code = data_source_code
        self.token = token
        self.user_agent = user_agent
        self.host = host
        self.found_code = found_code
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "DirectoryClient":
        return cls(
            settings.DIRECTORY_LOOKUP_URL or "",
            data_source_code=settings.DIRECTORY_DATA_SOURCE_CODE,
            token=settings.DIRECTORY_TOKEN,
            user_agent=settings.DIRECTORY_USER_AGENT,
            host=settings.DIRECTORY_HOST,
            found_code=settings.DIRECTORY_FOUND_CODE,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        if self.host:
            headers["Host"] = self.host
        return headers

    def _extract(self, name: str, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            logger.warning("Directory lookup for %r: unexpected payload %r", name, data)
            return None
        code = data.get(STATUS_CODE_KEY)
        results = data.get(RESULT_LIST_KEY)
        # Le code peut arriver en str selon les passerelles
        if str(code) != str(self.found_code) or not isinstance(results, list) or not results:
            logger.info("Directory lookup for %r: not found (code=%s)", name, code)
            return None
        first = results[0]
        value = first.get(RESULT_VALUE_KEY) if isinstance(first, dict) else None
        if not value:
            logger.info("Directory lookup for %r: first result has no value", name)
            return None
        return str(value)

    async def lookup(self, name: str) -> Optional[str]:
        """Retourne l'identifiant du premier résultat, ou None."""
        name = (name or "").strip()
        if not name:
            return None

        params = {"data_source_code": self.data_source_code, "keyword_value": name}
        try:
            resp = await http_get(self.url, params=params, headers=self._headers(), timeout=self.timeout)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Directory lookup for %r failed: %s", name, exc)
            return None

        status_code = getattr(resp, "status_code", None)
        if status_code is None or not (200 <= status_code < 300):
            logger.warning("Directory lookup for %r: HTTP %s", name, status_code)
            return None

        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("Directory lookup for %r: invalid JSON (%s)", name, exc)
            return None

        return self._extract(name, data)
