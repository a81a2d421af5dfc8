"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_env_file() -> Path | str:
    """Retourne le fichier .env à charger (ENV_FILE, puis .env.{APP_ENV}, puis .env)."""
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return explicit
    cwd = Path.cwd()
    specific = cwd / f".env.{os.getenv('APP_ENV', 'dev')}"
    if specific.exists():
        return specific
    return cwd / ".env"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "eduplatform-dashboard"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "DEBUG"

    # Record store (Supabase). Both values are required for live mode.
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    STORE_TIMEOUT_SECONDS: float = 8.0

    # Dashboard pages
    DASHBOARD_COURSE_LIMIT: int = 10
    DASHBOARD_AD_LIMIT: int = 20

    @property
    def store_configured(self) -> bool:
        """Indique si l'URL et la clé du store sont toutes deux renseignées."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
