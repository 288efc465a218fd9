"""Credenciales resueltas desde `AppSettings` (env vars / .env de usuario)."""

from __future__ import annotations

from core.config import AppSettings
from core.domain.errors import MissingKeyError
from core.domain.models import Credentials


class SettingsCredentialStore:
    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def get_credentials(self, provider_name: str) -> Credentials:
        api_key = (self._settings.api_key or "").strip()
        if not api_key:
            raise MissingKeyError(
                f"No API key configured for {provider_name}; set MAYAR_API_KEY or run `mayar doctor setup`"
            )
        return Credentials(api_key=api_key, base_url=self._settings.base_url)
