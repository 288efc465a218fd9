"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""

from core.interfaces.credentials import CredentialStore
from core.interfaces.output import OutputBuilder
from core.interfaces.parameters import ParameterSource
from core.interfaces.transport import Transport

__all__ = [
    "CredentialStore",
    "OutputBuilder",
    "ParameterSource",
    "Transport",
]
