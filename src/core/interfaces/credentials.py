"""Contrato del almacén de credenciales."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Credentials


@runtime_checkable
class CredentialStore(Protocol):
    """Lectura idempotente y sin efectos de la credencial de un proveedor."""

    def get_credentials(self, provider_name: str) -> Credentials:
        ...
