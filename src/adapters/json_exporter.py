"""Exportación JSON de los items de salida.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Permite persistir la respuesta (o el registro de error) de una ejecución.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from core.domain.models import OutputItem


def export_outputs_json(*, outputs: Sequence[OutputItem], output_path: Path) -> Path:
    """Exporta los payloads a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [item.model_dump(mode="json")["payload"] for item in outputs]
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
