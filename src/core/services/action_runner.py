"""Punto de entrada: ejecutar el (resource, operation) seleccionado.

Por qué aquí:
- Une fuente de parámetros, dispatcher y política de continuación en un
  único punto que reutilizan la CLI, los tests o un framework externo.
- La presentación (prints, progreso) queda fuera del Core.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from adapters.credentials import SettingsCredentialStore
from adapters.http_client import HttpxTransport
from adapters.output import to_output as default_to_output
from adapters.parameters import MappingParameterSource
from core.config import AppSettings
from core.domain.errors import OperationError
from core.domain.models import ExecutionOptions, OutputItem
from core.interfaces.credentials import CredentialStore
from core.interfaces.output import OutputBuilder
from core.interfaces.parameters import ParameterSource
from core.interfaces.transport import Transport
from core.services.continuation import collapse, guard
from core.services.dispatcher import (
    NO_OPERATION_PAYLOAD,
    OperationDispatcher,
    find_route,
    read_request,
)
from core.services.request_executor import RequestExecutor, Sleep

logger = logging.getLogger(__name__)


def parse_options(raw: Any) -> ExecutionOptions:
    try:
        return ExecutionOptions.model_validate(raw or {})
    except PydanticValidationError as exc:
        raise OperationError(f"Invalid options: {exc}") from exc


class ActionRunner:
    """Ejecuta una acción leyendo `resource`, `operation` y `options` de la fuente."""

    def __init__(
        self,
        *,
        parameters: ParameterSource,
        credentials: CredentialStore,
        transport: Transport,
        to_output: OutputBuilder = default_to_output,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._parameters = parameters
        self._to_output = to_output
        self._dispatcher = OperationDispatcher(RequestExecutor(transport, sleep=sleep), credentials)

    async def execute(self, item_index: int = 0) -> list[OutputItem]:
        resource = self._parameters.get_parameter("resource", item_index)
        operation = self._parameters.get_parameter("operation", item_index)
        options = parse_options(self._parameters.get_parameter("options", item_index, {}))

        route = find_route(resource, operation)
        if route is None:
            logger.info("No route for %s.%s", resource, operation)
            return [self._to_output(dict(NO_OPERATION_PAYLOAD))]

        request = read_request(route, self._parameters, item_index)

        async def _run() -> Any:
            result = await self._dispatcher.dispatch(request, options)
            return result.to_payload()

        outcome = await guard(_run)
        return collapse(outcome, continue_on_fail=options.continue_on_fail, to_output=self._to_output)


_OPTION_ALIASES = {
    "continue_on_fail": "continueOnFail",
    "max_retries": "maxRetries",
    "retry_delay_ms": "retryDelayMs",
}


def default_options(settings: AppSettings) -> dict[str, Any]:
    return {
        "continueOnFail": settings.continue_on_fail,
        "maxRetries": settings.max_retries,
        "retryDelayMs": settings.retry_delay_ms,
        "debug": settings.debug,
    }


async def run_action(
    resource: str,
    operation: str,
    params: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
    *,
    settings: AppSettings | None = None,
    transport: Transport | None = None,
) -> list[OutputItem]:
    """Atajo con los adaptadores por defecto (settings, httpx).

    Las `options` explícitas tienen prioridad sobre las de `AppSettings`.
    """

    settings = settings or AppSettings()
    merged_options = default_options(settings)
    merged_options.update(
        {_OPTION_ALIASES.get(k, k): v for k, v in (options or {}).items() if v is not None}
    )

    values = dict(params or {})
    values.update({"resource": resource, "operation": operation, "options": merged_options})
    parameters = MappingParameterSource(values)
    credentials = SettingsCredentialStore(settings)

    if transport is not None:
        runner = ActionRunner(parameters=parameters, credentials=credentials, transport=transport)
        return await runner.execute()

    async with HttpxTransport(settings=settings) as owned:
        runner = ActionRunner(parameters=parameters, credentials=credentials, transport=owned)
        return await runner.execute()
