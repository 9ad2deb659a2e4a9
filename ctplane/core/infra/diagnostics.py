"""
Canal de diagnósticos: errores y avisos devueltos por las operaciones de recursos.

Los handlers lanzan excepciones; el engine las convierte en Diagnostic y
la CLI decide cómo mostrarlas.
"""

from enum import Enum
from typing import List, Optional

from ctplane.core.errors import CommercetoolsApiError, CtplaneError


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic:
    """Un mensaje de diagnóstico asociado (opcionalmente) a un recurso."""
    def __init__(
        self,
        severity: Severity,
        summary: str,
        detail: str = "",
        address: Optional[str] = None,
    ):
        self.severity = severity
        self.summary = summary
        self.detail = detail
        self.address = address

    def __repr__(self) -> str:
        return f"Diagnostic({self.severity.value}, {self.address or '-'}: {self.summary})"


def from_error(error: Exception, address: Optional[str] = None) -> Diagnostic:
    """Convierte una excepción en un diagnóstico de error."""
    detail = ""
    if isinstance(error, CommercetoolsApiError) and error.errors:
        detail = "; ".join(
            f"{e.get('code', 'Error')}: {e.get('message', '')}" for e in error.errors
        )
    elif not isinstance(error, CtplaneError):
        detail = type(error).__name__
    return Diagnostic(Severity.ERROR, str(error), detail=detail, address=address)


def has_errors(diagnostics: List[Diagnostic]) -> bool:
    return any(d.severity == Severity.ERROR for d in diagnostics)
