from __future__ import annotations
"""server/gitlab_notifier/api/v1/router.py
~~~~~~~~~~~~~~~~~~~~~~~~
Router principal.
"""
from fastapi import APIRouter

from gitlab_notifier.api.v1.endpoints import gitlab_webhook, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(gitlab_webhook.router, tags=["webhooks"])
