"""
Core: lógica de negocio pura.

ENFORCEMENT (arquitectura limpia):
- Este paquete NO debe importar: ctplane.cli ni ctplane.commercetools.
- Permitido: typing, pathlib.Path, pydantic, yaml, ctplane.core.*.
- Los providers y la CLI importan desde core; nunca al revés.
"""

from ctplane.core.errors import CtplaneError, ValidationError, ConfigError, ProviderError

__all__ = ["CtplaneError", "ValidationError", "ConfigError", "ProviderError"]
