"""Contrato del constructor de sobres de salida."""

from __future__ import annotations

from typing import Any, Protocol

from core.domain.models import OutputItem


class OutputBuilder(Protocol):
    def __call__(self, payload: Any) -> OutputItem:
        ...
