"""
Configuración del provider commercetools.

Se lee de variables de entorno (CTP_*), cargando antes el .env del proyecto
si existe. Las credenciales nunca se escriben en el estado.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from ctplane.core.errors import ConfigError


ENV_VARS = {
    "client_id": "CTP_CLIENT_ID",
    "client_secret": "CTP_CLIENT_SECRET",
    "project_key": "CTP_PROJECT_KEY",
    "scopes": "CTP_SCOPES",
    "api_url": "CTP_API_URL",
    "auth_url": "CTP_AUTH_URL",
}

DEFAULT_API_URL = "https://api.europe-west1.gcp.commercetools.com"
DEFAULT_AUTH_URL = "https://auth.europe-west1.gcp.commercetools.com"


class ProviderSettings(BaseModel):
    """Credenciales y endpoints del proyecto commercetools"""
    client_id: str = Field(..., min_length=1, description="OAuth2 client id")
    client_secret: str = Field(..., min_length=1, description="OAuth2 client secret")
    project_key: str = Field(..., min_length=1, description="Clave del proyecto")
    scopes: str = Field("", description="Scopes separados por espacio (ej: manage_project:<key>)")
    api_url: str = Field(DEFAULT_API_URL, description="URL base de la API HTTP")
    auth_url: str = Field(DEFAULT_AUTH_URL, description="URL base del servidor de autorización")
    timeout_seconds: float = Field(30.0, gt=0, description="Timeout por request")

    @field_validator("api_url", "auth_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def effective_scopes(self) -> str:
        """Sin scopes explícitos se pide manage_project sobre el proyecto."""
        return self.scopes or f"manage_project:{self.project_key}"


def load_env_file(project_root: Optional[Path] = None) -> None:
    """Carga el .env del proyecto (no pisa variables ya definidas)."""
    root = project_root or Path.cwd()
    env_file = root / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> ProviderSettings:
    """
    Construye la configuración a partir de variables de entorno.

    Raises:
        ConfigError: si falta alguna variable obligatoria o tiene formato inválido
    """
    env = os.environ if environ is None else environ
    values = {}
    for field_name, var in ENV_VARS.items():
        value = (env.get(var) or "").strip()
        if value:
            values[field_name] = value

    missing = [ENV_VARS[k] for k in ("client_id", "client_secret", "project_key") if k not in values]
    if missing:
        raise ConfigError(f"Faltan variables de entorno: {', '.join(missing)}")

    try:
        return ProviderSettings(**values)
    except PydanticValidationError as e:
        raise ConfigError(f"Configuración de commercetools inválida: {e}") from e
