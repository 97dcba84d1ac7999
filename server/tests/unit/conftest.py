# server/tests/unit/conftest.py
# ─────────────────────────────────────────────────────────────────────────────
# Conftest pour les TESTS UNITAIRES de l'API.
#
# - `api` : fabrique un TestClient dont la dépendance get_settings est
#   surchargée (secret GitLab, annuaire…) ; les overrides sont retirés en
#   teardown pour ne pas fuiter d'un test à l'autre.
# ─────────────────────────────────────────────────────────────────────────────

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def api(make_settings, feishu_calls, directory_calls):
    from gitlab_notifier.core.config import get_settings
    from gitlab_notifier.main import app

    def _client(**settings_overrides) -> TestClient:
        settings = make_settings(**settings_overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app)

    try:
        yield _client
    finally:
        app.dependency_overrides.pop(get_settings, None)
