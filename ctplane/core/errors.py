"""
Errores del Control Plane.

El core solo define excepciones; las capas (CLI/engine) se encargan del formato de salida.
"""

from typing import Any, Dict, List, Optional


class CtplaneError(Exception):
    """Error base de ctplane."""
    pass


class ValidationError(CtplaneError):
    """Error de validación de configuración o modelos."""
    pass


class ConfigError(CtplaneError):
    """Error de configuración (archivo faltante, formato inválido, variables de entorno)."""
    pass


class ProviderError(CtplaneError):
    """Error delegado desde un provider (commercetools)."""
    pass


class CommercetoolsApiError(ProviderError):
    """Respuesta de error de la API de commercetools (status != 2xx)."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"


class RetryableError(CtplaneError):
    """Envuelve un error que puede reintentarse dentro de retry_context."""

    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error


class NonRetryableError(CtplaneError):
    """Envuelve un error que corta el reintento inmediatamente."""

    def __init__(self, error: Exception):
        super().__init__(str(error))
        self.error = error
