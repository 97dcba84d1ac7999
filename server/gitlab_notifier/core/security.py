from __future__ import annotations
"""server/gitlab_notifier/core/security.py
~~~~~~~~~~~~~~~~~~~~~~~~
Vérification du secret GitLab (header X-Gitlab-Token).

Si GITLAB_SECRET_TOKEN est configuré, le header doit correspondre exactement,
sinon 401 "unauthorized". Sans secret configuré, tout passe.
"""
import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from gitlab_notifier.core.config import Settings, get_settings

log = logging.getLogger(__name__)


async def gitlab_token_auth(
    x_gitlab_token: Optional[str] = Header(default=None, alias="X-Gitlab-Token"),
    settings: Settings = Depends(get_settings),
) -> None:
    expected = settings.GITLAB_SECRET_TOKEN
    if not expected:
        return
    if x_gitlab_token is None or not hmac.compare_digest(
        x_gitlab_token.encode("utf-8"), expected.encode("utf-8")
    ):
        log.error("Invalid GitLab token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
