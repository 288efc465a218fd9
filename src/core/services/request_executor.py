"""Ejecución HTTP con reintentos acotados.

Responsabilidad:
- Resolver la URL completa (base de la credencial + path).
- Adjuntar `Authorization: Bearer <api_key>` y las cabeceras del llamador.
- Reintentar secuencialmente ante status transitorios, con backoff lineal
  (`retry_delay_ms * intento`).

Los fallos que no se reintentan (o que agotan el presupuesto) se propagan
sin modificar, con toda su metadata de respuesta.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from core.domain.models import Credentials, HttpCallSpec, RetryPolicy
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

FALLBACK_STATUS_CODE = 500

Sleep = Callable[[float], Awaitable[Any]]


def build_url(base_url: str, path: str) -> str:
    clean_base = base_url[:-1] if base_url.endswith("/") else base_url
    clean_path = path[1:] if path.startswith("/") else path
    return f"{clean_base}/{clean_path}"


def extract_status_code(error: BaseException) -> int:
    """Status HTTP de un fallo; 500 si el fallo no trae ninguno."""

    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return FALLBACK_STATUS_CODE


class RequestExecutor:
    """Ejecuta un `HttpCallSpec` contra el transporte aplicando un `RetryPolicy`."""

    def __init__(self, transport: Transport, *, sleep: Sleep = asyncio.sleep) -> None:
        self._transport = transport
        self._sleep = sleep

    async def execute(
        self,
        spec: HttpCallSpec,
        policy: RetryPolicy,
        credentials: Credentials,
    ) -> Any:
        url = build_url(credentials.resolved_base_url(), spec.path)
        headers = {"Authorization": f"Bearer {credentials.api_key}"}
        headers.update(spec.headers)

        attempt = 0
        while True:
            logger.debug("%s %s (attempt %d)", spec.method, url, attempt + 1)
            try:
                return await self._transport.request(
                    method=spec.method,
                    url=url,
                    json=spec.as_json,
                    body=spec.body,
                    query=spec.query,
                    headers=headers,
                )
            except Exception as exc:
                status_code = extract_status_code(exc)
                if not policy.should_retry(status_code, attempt):
                    raise
                attempt += 1
                delay = policy.delay_seconds(attempt)
                logger.warning(
                    "%s %s failed with status %d; retry %d/%d in %.3fs",
                    spec.method,
                    spec.path,
                    status_code,
                    attempt,
                    policy.max_retries,
                    delay,
                )
                await self._sleep(delay)
