"""`python -m main` con `src/` como directorio de trabajo: lanza la CLI `mayar`."""

from __future__ import annotations

import sys

# Las respuestas de Mayar traen texto UTF-8 (nombres, descripciones); las
# consolas Windows con cp1252 fallarían al imprimirlas.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run

if __name__ == "__main__":
    run()
