"""Taxonomía de errores del Core.

Por qué una jerarquía propia:
- Los errores locales (validación, input malformado) nunca llegan a la red y
  se distinguen por tipo de los errores del servicio remoto.
- La política de continuación clasifica cualquier fallo en `ApiError` u
  `OperationError` sin inspeccionar detalles internos.
"""

from __future__ import annotations

from typing import Any


class MayarError(Exception):
    """Base de todos los errores de la aplicación."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MayarError):
    """Un campo no cumple su regla de dominio (pre-flight)."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class MalformedInputError(MayarError):
    """Un parámetro crudo no se puede interpretar (p.ej. JSON inválido)."""


class MissingKeyError(MayarError):
    """No hay API key configurada para el proveedor."""


class TransportError(MayarError):
    """El servicio remoto respondió con un status no exitoso."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: Any = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.response = response


class NetworkError(MayarError):
    """La llamada no llegó a obtener un status (DNS, conexión, timeout)."""

    status_code = None


class ApiError(MayarError):
    """Fallo clasificado como originado en el servicio remoto."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_exception(cls, error: BaseException) -> "ApiError":
        status = getattr(error, "status_code", None)
        if status is None:
            status = getattr(error, "status", None)
        response = getattr(error, "response", None)
        if status is None and response is not None:
            status = getattr(response, "status_code", None)
        body = getattr(error, "body", None)
        return cls(str(error) or "Request failed", status_code=status, body=body)


class OperationError(MayarError):
    """Fallo clasificado como local (input inválido, configuración, bug)."""
