# server/tests/conftest.py
"""
Conftest *global* pour toute la suite de tests.

Points clés :
- Pose les ENV *avant* les imports gitlab_notifier.* (FEISHU_WEBHOOK_URL est
  obligatoire pour Settings()).
- Aucun appel réseau : les wrappers HTTP `http_post` (provider Feishu) et
  `http_get` (annuaire) sont monkeypatchés et enregistrent les appels.
- Fournit des payloads GitLab réalistes (merge request / pipeline).
"""

from __future__ import annotations

import copy
import os

import httpx
import pytest

WEBHOOK_URL = "http://example.invalid/feishu-hook"
DIRECTORY_URL = "http://directory.invalid/search"


def pytest_configure(config) -> None:
    os.environ["FEISHU_WEBHOOK_URL"] = WEBHOOK_URL
    for var in ("GITLAB_SECRET_TOKEN", "DIRECTORY_LOOKUP_URL", "DIRECTORY_TOKEN", "DIRECTORY_HOST"):
        os.environ.pop(var, None)


# ============================================================================
# Settings
# ============================================================================
@pytest.fixture
def make_settings():
    """Construit un Settings isolé (ignore le .env local)."""
    from gitlab_notifier.core.config import Settings

    def _make(**overrides):
        values = {"FEISHU_WEBHOOK_URL": WEBHOOK_URL}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


# ============================================================================
# Faux réseau
# ============================================================================
@pytest.fixture
def feishu_calls(monkeypatch):
    """
    Patch `http_post` du provider Feishu :
      - enregistre chaque envoi (url, json) dans la liste retournée
      - répond {"code": 0, "msg": "success"} par défaut ; modifiable via
        `feishu_calls.response = httpx.Response(...)` ou une exception.
    """
    from gitlab_notifier.infrastructure.notifications.providers import feishu_provider

    class _Calls(list):
        response: object = httpx.Response(200, json={"code": 0, "msg": "success"})

    calls = _Calls()

    async def fake_post(url, *, json, timeout):
        calls.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(calls.response, Exception):
            raise calls.response
        return calls.response

    monkeypatch.setattr(feishu_provider, "http_post", fake_post, raising=True)
    return calls


@pytest.fixture
def directory_calls(monkeypatch):
    """
    Patch `http_get` de l'annuaire :
      - `directory_calls.known` : {nom: identifiant} → réponse "trouvé"
      - nom inconnu → {"code": 0, "data": []}
    """
    from gitlab_notifier.infrastructure.directory import directory_client

    class _Calls(list):
        known: dict = {}
        error: Exception | None = None

    calls = _Calls()
    calls.known = {}

    async def fake_get(url, *, params, headers, timeout):
        calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if calls.error is not None:
            raise calls.error
        ident = calls.known.get(params["keyword_value"])
        data = [{"value": ident, "label": params["keyword_value"]}] if ident else []
        return httpx.Response(200, json={"code": 0, "data": data})

    monkeypatch.setattr(directory_client, "http_get", fake_get, raising=True)
    return calls


# ============================================================================
# Payloads GitLab
# ============================================================================
_MR_PAYLOAD = {
    "object_kind": "merge_request",
    "event_type": "merge_request",
    "user": {"id": 1, "name": "Alice", "username": "alice"},
    "project": {"id": 7, "name": "Proj", "web_url": "http://gitlab.local/group/proj"},
    "object_attributes": {
        "id": 900,
        "iid": 42,
        "action": "open",
        "state": "opened",
        "title": "Fix bug",
        "description": "Fixes the crash on startup",
        "source_branch": "fix/1",
        "target_branch": "develop",
        "work_in_progress": False,
        "draft": False,
        "url": "http://x/mr/42",
        "last_commit": {"id": "abc123", "message": "Fix null pointer\n\nLonger explanation"},
    },
    "assignees": [{"id": 2, "name": "Bob", "username": "bob"}],
}

_PIPELINE_PAYLOAD = {
    "object_kind": "pipeline",
    "user": {"id": 1, "name": "Alice", "username": "alice"},
    "project": {"id": 7, "name": "Proj", "web_url": "http://gitlab.local/group/proj"},
    "object_attributes": {
        "id": 314,
        "ref": "main",
        "status": "success",
        "created_at": "2024-05-01 10:00:00 UTC",
        "finished_at": "2024-05-01 10:01:05 UTC",
        "duration": 60,
    },
}


def _merge(base: dict, overrides: dict) -> dict:
    out = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


@pytest.fixture
def mr_payload():
    """mr_payload(object_attributes={...}, assignees=[...]) → copie modifiée."""
    return lambda **overrides: _merge(_MR_PAYLOAD, overrides)


@pytest.fixture
def pipeline_payload():
    return lambda **overrides: _merge(_PIPELINE_PAYLOAD, overrides)
