"""Sobre de salida para el framework invocante."""

from __future__ import annotations

from typing import Any

from core.domain.models import OutputItem


def to_output(payload: Any) -> OutputItem:
    return OutputItem(payload=payload)
