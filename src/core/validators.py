"""Validadores de dominio (funciones puras).

Por qué funciones sueltas:
- Cada validador comprueba un único valor y falla con `ValidationError`
  nombrando el campo; no hay I/O ni estado.
- El dispatcher los invoca en el orden de declaración de los campos, así el
  primer campo inválido es el que se reporta.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from numbers import Integral, Real
from typing import Any

from core.domain.errors import ValidationError
from core.domain.models import InvoiceItem

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_MOBILE_RE = re.compile(r"^\+?\d{8,15}$")
_ISO_TIMESTAMP_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?(Z|[+-]\d{2}:\d{2})?$"
)
_FRACTION_RE = re.compile(r"\.(\d{1,6})")

MIN_ITEM_QUANTITY = 1
MIN_ITEM_RATE = 0.01


def require_non_empty_string(label: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required", field=label)


def require_email(label: str, value: Any) -> None:
    if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
        raise ValidationError(f"{label} must be a valid email address", field=label)


def require_mobile(label: str, value: Any) -> None:
    if not isinstance(value, str) or not _MOBILE_RE.match(value.strip()):
        raise ValidationError(
            f"{label} must be a valid mobile number (8-15 digits, optional leading +)",
            field=label,
        )


def require_optional_iso_date(label: str, value: Any) -> None:
    """Acepta vacío; si hay valor debe ser un timestamp ISO-8601 completo."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be an ISO-8601 timestamp", field=label)

    text = value.strip()
    if not _ISO_TIMESTAMP_RE.match(text):
        raise ValidationError(
            f"{label} must be an ISO-8601 timestamp (YYYY-MM-DDTHH:mm:ss.sssZ)",
            field=label,
        )
    # fromisoformat no acepta "Z" en intérpretes antiguos.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # En 3.10 fromisoformat solo acepta 3 o 6 dígitos de fracción.
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0"), text)
    try:
        datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"{label} is not a valid date: {value}", field=label) from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def require_number_range(
    label: str,
    value: Any,
    minimum: float,
    maximum: float | None = None,
) -> None:
    if not _is_number(value):
        raise ValidationError(f"{label} must be a number", field=label)
    if value < minimum:
        raise ValidationError(f"{label} must be at least {minimum}", field=label)
    if maximum is not None and value > maximum:
        raise ValidationError(f"{label} must be at most {maximum}", field=label)


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Integral):
        return True
    return isinstance(value, float) and value.is_integer()


def require_integer(label: str, value: Any, minimum: int) -> None:
    """Entero (o float sin parte decimal) mayor o igual que `minimum`."""

    if not _is_integral(value):
        raise ValidationError(f"{label} must be an integer", field=label)
    if value < minimum:
        raise ValidationError(f"{label} must be at least {minimum}", field=label)


def require_distinct(label_a: str, a: Any, label_b: str, b: Any) -> None:
    if a == b:
        raise ValidationError(f"{label_a} and {label_b} must differ", field=label_b)


def _item_value(item: Any, key: str) -> Any:
    if isinstance(item, InvoiceItem):
        return getattr(item, key)
    if isinstance(item, Mapping):
        return item.get(key)
    return None


def require_invoice_items(items: Sequence[Any] | None) -> None:
    """Valida la secuencia completa: no vacía y cada línea válida.

    Cada elemento puede ser un `InvoiceItem` o un mapping con
    `quantity`/`rate`.
    """

    if not items:
        raise ValidationError("Items must contain at least one item", field="Items")

    for position, item in enumerate(items, start=1):
        quantity = _item_value(item, "quantity")
        rate = _item_value(item, "rate")
        if _is_number(quantity) and not _is_integral(quantity):
            raise ValidationError(f"Item {position}: quantity must be an integer", field="Items")
        if not _is_number(quantity) or quantity < MIN_ITEM_QUANTITY:
            raise ValidationError(
                f"Item {position}: quantity must be at least {MIN_ITEM_QUANTITY}",
                field="Items",
            )
        if not _is_number(rate) or rate < MIN_ITEM_RATE:
            raise ValidationError(
                f"Item {position}: rate must be at least {MIN_ITEM_RATE}",
                field="Items",
            )
