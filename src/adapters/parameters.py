"""Fuente de parámetros basada en mappings.

Por qué existe:
- La CLI y los tests construyen los parámetros como dicts; este adaptador
  los expone con el contrato `ParameterSource` (un mapping por item).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


class MappingParameterSource:
    def __init__(self, items: Sequence[Mapping[str, Any]] | Mapping[str, Any]) -> None:
        if isinstance(items, Mapping):
            items = [items]
        self._items = [dict(item) for item in items]

    def get_parameter(self, name: str, item_index: int = 0, default: Any = None) -> Any:
        if item_index < 0 or item_index >= len(self._items):
            raise IndexError(f"No input item at index {item_index}")
        return self._items[item_index].get(name, default)
