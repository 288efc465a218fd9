"""Configuración de mayar-actions.

Fuentes, de menor a mayor prioridad:
- `.env` del directorio actual y luego el `.env` de usuario que escribe
  `mayar doctor setup` (API key y base URL de Mayar).
- Variables de entorno `MAYAR_*`.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import DEFAULT_BASE_URL

APP_DIR_NAME = "mayar-actions"
_ENV_HEADER = "# mayar-actions: written by `mayar doctor setup`"


def get_user_config_dir() -> Path:
    """`%APPDATA%`, `~/Library/Application Support` o `$XDG_CONFIG_HOME` según plataforma."""

    if sys.platform.startswith("win"):
        root = Path(os.environ.get("APPDATA") or Path.home())
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return root / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _read_env_assignments(path: Path) -> dict[str, str]:
    """`KEY=VALUE` de un .env existente; ignora comentarios y líneas sin `=`."""

    if not path.exists():
        return {}

    assignments: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        assignments[key] = value.strip().strip("\"'")
    return assignments


def write_user_env_vars(values: Mapping[str, str | None]) -> Path:
    """Fusiona `values` en el .env de usuario (un `None` conserva el valor previo)."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = _read_env_assignments(env_path)
    merged.update({key: value for key, value in values.items() if value is not None})

    body = "\n".join(f"{key}={merged[key]}" for key in sorted(merged))
    env_path.write_text(f"{_ENV_HEADER}\n{body}\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Credenciales de Mayar y valores por defecto de `ExecutionOptions`.

    Las opciones explícitas de `run_action` (o de la CLI) tienen prioridad
    sobre `max_retries`, `retry_delay_ms`, `continue_on_fail` y `debug`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MAYAR_",
        extra="ignore",
        case_sensitive=False,
        # El .env de usuario (doctor setup) pisa al del directorio actual.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="API key de Mayar (bearer).",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=8,
        description="Base URL de la API de Mayar.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="mayar-actions/0.1",
        min_length=1,
        description="User-Agent de las peticiones.",
    )

    max_retries: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Reintentos máximos ante status transitorios (429/5xx).",
    )
    retry_delay_ms: int = Field(
        default=500,
        ge=0,
        le=30_000,
        description="Retardo base entre reintentos (ms), crece linealmente.",
    )
    continue_on_fail: bool = Field(
        default=False,
        description="Convertir fallos en un registro {error: ...} en vez de abortar.",
    )
    debug: bool = Field(
        default=False,
        description="Adjuntar metadatos de la petición (_meta) a la respuesta.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI.",
    )
