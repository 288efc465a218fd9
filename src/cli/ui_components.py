"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from core.domain.errors import ApiError, MayarError
from core.domain.models import OutputItem
from core.services.dispatcher import Route


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("MAYAR ACTIONS", style="bold cyan")
    subtitle = Text("Balance • Invoice • Coupon • Customer", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_routes_table(routes: Iterable[Route]) -> Table:
    """Tabla con los pares (resource, operation) soportados."""

    table = Table(title="Supported actions")
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Operation", style="white")
    table.add_column("Parameters", style="dim")
    for route in routes:
        names = ", ".join(name for name, _ in route.params) or "-"
        table.add_row(route.resource.value, route.operation, names)
    return table


def build_outputs_panel(outputs: Sequence[OutputItem]) -> Panel:
    """Panel con los payloads de salida en JSON resaltado."""

    payloads = [item.model_dump(mode="json")["payload"] for item in outputs]
    data = payloads[0] if len(payloads) == 1 else payloads
    rendered = json.dumps(data, ensure_ascii=False, indent=2)
    is_error = isinstance(data, dict) and set(data) == {"error"}
    return Panel(
        Syntax(rendered, "json", word_wrap=True),
        title=Text("Error record" if is_error else "Response", style="bold"),
        border_style="yellow" if is_error else "green",
    )


def build_error_panel(error: MayarError) -> Panel:
    """Panel para errores clasificados (API vs operación local)."""

    body = Text()
    body.append(error.message + "\n")
    if isinstance(error, ApiError):
        title = Text("API error", style="bold red")
        if error.status_code is not None:
            body.append(f"\nStatus: {error.status_code}", style="dim")
        if error.body is not None:
            body.append(f"\nBody: {json.dumps(error.body, ensure_ascii=False, default=str)}", style="dim")
    else:
        title = Text("Operation error", style="bold red")
    return Panel(body, title=title, border_style="red")
