from __future__ import annotations
"""server/gitlab_notifier/core/config.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres (pydantic-settings).

Lus depuis l'environnement puis un éventuel fichier `.env`.
`FEISHU_WEBHOOK_URL` est obligatoire : sans lui, `get_settings()` lève une
ValidationError et le serveur refuse de démarrer.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Livraison Feishu (obligatoire)
    FEISHU_WEBHOOK_URL: str

    # Secret partagé avec GitLab (header X-Gitlab-Token), optionnel
    GITLAB_SECRET_TOKEN: Optional[str] = None

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_SECONDS: float = Field(10.0, gt=0)

    # Annuaire (résolution nom → identifiant Feishu). Sans URL : pas de lookup.
    DIRECTORY_LOOKUP_URL: Optional[str] = None
    DIRECTORY_DATA_SOURCE_CODE: str = ""
    DIRECTORY_TOKEN: Optional[str] = None
    DIRECTORY_USER_AGENT: str = "gitlab-feishu-notifier"
    DIRECTORY_HOST: Optional[str] = None
    DIRECTORY_FOUND_CODE: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("FEISHU_WEBHOOK_URL")
    @classmethod
    def _webhook_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("FEISHU_WEBHOOK_URL must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return v

    @field_validator("GITLAB_SECRET_TOKEN", "DIRECTORY_LOOKUP_URL", "DIRECTORY_TOKEN", "DIRECTORY_HOST")
    @classmethod
    def _blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        # Une variable vide dans le .env vaut "non configurée"
        if v is None or not v.strip():
            return None
        return v

    @property
    def directory_enabled(self) -> bool:
        return bool(self.DIRECTORY_LOOKUP_URL)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
