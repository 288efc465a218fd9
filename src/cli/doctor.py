"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.credentials import SettingsCredentialStore
from adapters.http_client import HttpxTransport
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import MayarError
from core.domain.models import DEFAULT_BASE_URL, HttpCallSpec, RetryPolicy
from core.services.dispatcher import PROVIDER_NAME
from core.services.request_executor import RequestExecutor

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_balance(settings: AppSettings) -> tuple[bool, str]:
    """Authenticated GET /balance without retries."""

    try:
        credentials = SettingsCredentialStore(settings).get_credentials(PROVIDER_NAME)
        async with HttpxTransport(settings=settings) as transport:
            await RequestExecutor(transport).execute(
                HttpCallSpec(method="GET", path="/balance"),
                RetryPolicy(),
                credentials,
            )
        return True, "Authenticated request OK"
    except MayarError as exc:
        return False, exc.message


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Mayar Actions Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.api_key:
        table.add_row("API key", "OK", "MAYAR_API_KEY is set")
    else:
        table.add_row("API key", "MISSING", "Run `mayar doctor setup` or set MAYAR_API_KEY")
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row(
        "Retries",
        "OK",
        f"max_retries={settings.max_retries} retry_delay_ms={settings.retry_delay_ms}",
    )

    # Connectivity (best-effort)
    ok_api = False
    if settings.api_key:
        ok_api, detail_api = asyncio.run(_check_balance(settings))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)
    else:
        table.add_row("API connectivity", "SKIPPED", "No API key")

    _console.print(table)

    if settings.api_key and not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] Check that the API key matches the base URL "
            "(production and sandbox keys are not interchangeable)."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive API setup (stores config in the user config .env)."""

    base_url = typer.prompt("Mayar API base URL", default=DEFAULT_BASE_URL, show_default=True).strip()
    api_key = typer.prompt("Mayar API key", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not api_key:
        raise typer.BadParameter("base_url and api_key are required")

    env_path = write_user_env_vars(
        {
            "MAYAR_BASE_URL": base_url,
            "MAYAR_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved Mayar config to:[/green] {env_path}")
