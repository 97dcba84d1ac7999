from __future__ import annotations
"""
server/gitlab_notifier/api/deps.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Dépendances communes côté API.

- get_notification_service : service de notification construit depuis les
  Settings (annuaire + provider Feishu). Surchargé dans les tests via
  `app.dependency_overrides`.
"""

from fastapi import Depends

from gitlab_notifier.application.services.notification_service import NotificationService
from gitlab_notifier.core.config import Settings, get_settings


def get_notification_service(settings: Settings = Depends(get_settings)) -> NotificationService:
    return NotificationService.from_settings(settings)
