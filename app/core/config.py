# app/core/config.py
from __future__ import annotations

from functools import lru_cache
import json
from typing import List, Union, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environnement
    ENVIRONMENT: str = "dev"                 # dev | prod
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS (accepte JSON ["http://...","http://..."] ou CSV "http://...,http://...")
    CORS_ORIGINS: Union[List[str], str] = []

    # Airtable (table des employés)
    AIRTABLE_API_KEY: Optional[str] = None
    AIRTABLE_BASE_ID: Optional[str] = None
    AIRTABLE_TABLE_NAME: str = "Employees"
    AIRTABLE_API_BASE: str = "https://api.airtable.com/v0"
    AIRTABLE_TIMEOUT: float = 20.0
    PIN_LOOKUP_TIMEOUT: float = 5.0          # vérification PIN = chemin critique

    # Cloudinary (photo, optionnel)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER: str = "employees"

    # Emails: Resend d'abord, SMTP en secours
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_BASE: str = "https://api.resend.com"
    EMAIL_FROM: str = "RH <onboarding@resend.dev>"
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_STARTTLS: bool = True
    NOTIFY_SHUTDOWN_TIMEOUT: float = 10.0

    # Domaine
    MATRICULE_PREFIX: str = "NOV"
    REQUIRE_CONTACT_FIELDS: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"   # ignore les variables inconnues

    @property
    def cors_origins(self) -> List[str]:
        raw = self.CORS_ORIGINS
        if isinstance(raw, str):
            raw = raw.strip()
            raw = json.loads(raw) if raw.startswith("[") else raw.split(",")
        return [o.strip() for o in raw if o and o.strip()]

    @property
    def airtable_configured(self) -> bool:
        return bool(self.AIRTABLE_API_KEY and self.AIRTABLE_BASE_ID)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME and self.CLOUDINARY_API_KEY and self.CLOUDINARY_API_SECRET)

    @property
    def resend_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Construite une seule fois au démarrage puis passée explicitement à l'app."""
    return Settings()
