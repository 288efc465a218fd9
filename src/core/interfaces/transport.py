"""Contrato del transporte HTTP autenticado.

Reglas de diseño:
- `request` es asíncrono porque hace I/O.
- Ejecuta exactamente una petición: los reintentos son responsabilidad de
  `core.services.request_executor`.
- En fallo lanza `TransportError` (con `status_code`) o `NetworkError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
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
        """Ejecuta una petición y devuelve el cuerpo ya decodificado."""

        ...
