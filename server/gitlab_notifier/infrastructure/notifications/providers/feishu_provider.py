from __future__ import annotations
"""server/gitlab_notifier/infrastructure/notifications/providers/feishu_provider.py
~~~~~~~~~~~~~~~~~~~~~~~~
FeishuProvider — envoi de cartes interactives via un webhook de bot Feishu.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from gitlab_notifier.core.errors import NotificationDeliveryError

logger = logging.getLogger(__name__)


async def http_post(url: str, *, json: Dict[str, Any], timeout: float) -> httpx.Response:
    """POST asynchrone ; conçu pour être *monkeypatché* dans les tests."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.post(url, json=json, headers={"Content-Type": "application/json"})


class FeishuProvider:
    def __init__(self, webhook: Optional[str], *, timeout: float = 10.0):
        if not webhook:
            raise ValueError("Feishu webhook URL must be provided")
        self.webhook = webhook
        self.timeout = timeout

    async def send(self, payload: Dict[str, Any]) -> Any:
        """
        Envoie `payload` ({"msg_type": "interactive", "card": {...}}) tel quel.
        - Retourne le corps de réponse (JSON si possible, sinon texte).
        - Erreur réseau, HTTP non-2xx ou enveloppe Feishu `code != 0`
          → loggé puis NotificationDeliveryError.
        """
        try:
            r = await http_post(self.webhook, json=payload, timeout=self.timeout)
        except Exception as exc:
            logger.error("Error sending Feishu notification: %s", exc)
            raise NotificationDeliveryError(f"Feishu webhook unreachable: {exc}") from exc

        if not (200 <= r.status_code < 300):
            logger.error("Error sending Feishu notification: HTTP %s %s", r.status_code, r.text)
            raise NotificationDeliveryError(
                f"Feishu webhook returned HTTP {r.status_code}",
                status_code=r.status_code,
                body=r.text,
            )

        try:
            body = r.json()
        except ValueError:
            return r.text

        # Feishu répond 200 même en cas de refus (signature, quota…) : {"code": 19001, "msg": "..."}
        code = body.get("code", body.get("StatusCode", 0)) if isinstance(body, dict) else 0
        if code not in (0, None):
            logger.error("Error sending Feishu notification: code=%s msg=%s", code, body.get("msg"))
            raise NotificationDeliveryError(
                f"Feishu webhook rejected message (code={code})",
                status_code=r.status_code,
                body=r.text,
            )
        return body
