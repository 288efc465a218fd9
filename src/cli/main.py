"""CLI principal (Typer + Rich).

Por qué aquí:
- La CLI solo traduce argumentos a parámetros y presenta resultados; la
  validación, el dispatch y los reintentos viven en `core`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_outputs_json
from cli import doctor
from cli.ui_components import build_error_panel, build_outputs_panel, build_routes_table, print_banner
from core.config import AppSettings
from core.domain.errors import ApiError, MayarError
from core.services.action_runner import run_action
from core.services.dispatcher import ROUTES, find_route

app = typer.Typer(no_args_is_help=True, help="Mayar payment API actions: balance, invoice, coupon, customer.")
app.add_typer(doctor.app, name="doctor")

_console = Console()

EXIT_API_ERROR = 1
EXIT_OPERATION_ERROR = 2


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


def _coerce(value: str, default: Any) -> Any:
    """Convierte el texto de `--param` al tipo del default declarado por la ruta."""

    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(default, (dict, list)):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"expected JSON, got {value!r}") from exc
    return value


def parse_params(raw_params: list[str], params_json: str | None, defaults: dict[str, Any]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if params_json:
        try:
            loaded = json.loads(params_json)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"--params-json is not valid JSON: {exc}") from exc
        if not isinstance(loaded, dict):
            raise typer.BadParameter("--params-json must be a JSON object")
        params.update(loaded)

    for raw in raw_params:
        if "=" not in raw:
            raise typer.BadParameter(f"expected KEY=VALUE, got {raw!r}")
        key, value = raw.split("=", 1)
        key = key.strip()
        params[key] = _coerce(value, defaults.get(key))
    return params


@app.command(name="run")
def run_command(
    resource: str = typer.Argument(..., help="balance | invoice | coupon | customer"),
    operation: str = typer.Argument(..., help="get | getAll | create | updateEmail"),
    param: list[str] = typer.Option([], "--param", "-p", help="Parameter as KEY=VALUE (repeatable)."),
    params_json: Optional[str] = typer.Option(None, "--params-json", help="All parameters as a JSON object."),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", min=0, max=5),
    retry_delay_ms: Optional[int] = typer.Option(None, "--retry-delay-ms", min=0, max=30_000),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Attach request metadata (_meta)."),
    continue_on_fail: Optional[bool] = typer.Option(
        None,
        "--continue-on-fail/--fail-fast",
        help="Return an {error} record instead of failing.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output payloads to a JSON file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    banner: bool = typer.Option(False, "--banner/--no-banner"),
) -> None:
    """Execute one (resource, operation) against the Mayar API."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    if banner:
        print_banner(_console)

    route = find_route(resource, operation)
    defaults = dict(route.params) if route else {}
    params = parse_params(param, params_json, defaults)
    options = {
        "maxRetries": max_retries,
        "retryDelayMs": retry_delay_ms,
        "debug": debug,
        "continueOnFail": continue_on_fail,
    }

    try:
        outputs = asyncio.run(run_action(resource, operation, params, options, settings=settings))
    except ApiError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=EXIT_API_ERROR) from exc
    except MayarError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=EXIT_OPERATION_ERROR) from exc

    _console.print(build_outputs_panel(outputs))
    if output is not None:
        path = export_outputs_json(outputs=outputs, output_path=output)
        _console.print(f"[green]Saved output to:[/green] {path}")


@app.command(name="routes")
def routes_command() -> None:
    """List the supported (resource, operation) pairs."""

    _console.print(build_routes_table(ROUTES.values()))


def run() -> None:
    app()
