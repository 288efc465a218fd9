"""Clasificación de errores y política de continuación.

Por qué un tipo resultado:
- `guard` convierte la invocación en `Ok | Err` sin interceptar nada fuera
  de ella.
- `collapse` decide en un único punto si el fallo se convierte en un
  registro `{error: ...}` (continue-on-fail) o se relanza como `ApiError`
  (fallo remoto) u `OperationError` (fallo local).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Union

from core.domain.errors import ApiError, MayarError, OperationError
from core.domain.models import OutputItem
from core.interfaces.output import OutputBuilder

logger = logging.getLogger(__name__)

_TRANSPORT_ATTRS = ("response", "status_code", "status")


@dataclass(frozen=True)
class Ok:
    payload: Any


@dataclass(frozen=True)
class Err:
    error: Exception


Outcome = Union[Ok, Err]


async def guard(call: Callable[[], Awaitable[Any]]) -> Outcome:
    try:
        return Ok(await call())
    except Exception as exc:
        return Err(exc)


def has_transport_metadata(error: BaseException) -> bool:
    return any(getattr(error, attr, None) is not None for attr in _TRANSPORT_ATTRS)


def classify(error: BaseException) -> MayarError:
    """API error si el fallo trae metadata de transporte; si no, error local."""

    if has_transport_metadata(error):
        return ApiError.from_exception(error)
    return OperationError(str(error) or "Operation failed")


def collapse(
    outcome: Outcome,
    *,
    continue_on_fail: bool,
    to_output: OutputBuilder,
) -> list[OutputItem]:
    if isinstance(outcome, Ok):
        return [to_output(outcome.payload)]

    error = outcome.error
    if continue_on_fail:
        message = str(error) or "Request failed"
        logger.warning("Continuing after failure: %s", message)
        return [to_output({"error": message})]

    raise classify(error) from error
