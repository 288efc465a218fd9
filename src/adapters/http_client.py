"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la traducción de fallos HTTP a la
  taxonomía del Core (`TransportError` / `NetworkError`).
- Facilita testeo: se puede sustituir por un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import NetworkError, TransportError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las peticiones se comporten igual.
    - Permite inyectar un transporte (p.ej. `httpx.MockTransport`) en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """Implementación de `core.interfaces.transport.Transport` sobre httpx.

    Ejecuta exactamente una petición por llamada. Si el cliente se crea aquí,
    se cierra con `aclose()` o al salir del `async with`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(settings)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        *,
        method: str,
        url: str,
        json: bool = True,
        body: Any = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        kwargs: dict[str, Any] = {
            "params": dict(query) if query else None,
            "headers": dict(headers) if headers else None,
        }
        if body is not None:
            if json:
                kwargs["json"] = body
            else:
                kwargs["content"] = body if isinstance(body, (str, bytes)) else str(body)

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"{method} {url} timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        payload = _decode_body(response)
        if response.is_error:
            logger.debug("%s %s -> HTTP %d", method, url, response.status_code)
            raise TransportError(
                f"Mayar API responded with HTTP {response.status_code}",
                status_code=response.status_code,
                body=payload,
                response=response,
            )
        return payload
