"""Contrato de la fuente de parámetros.

Por qué Protocol:
- El framework invocante ya declara y convierte los parámetros; el Core solo
  los lee por nombre e índice de item.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ParameterSource(Protocol):
    """Lectura síncrona de parámetros ya tipados según el esquema declarado."""

    def get_parameter(self, name: str, item_index: int = 0, default: Any = None) -> Any:
        ...
