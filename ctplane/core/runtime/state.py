"""
Estado local: copia cacheada de los recursos remotos.

La fuente de verdad es siempre la API remota; el estado solo guarda el ID
y los últimos atributos observados de cada recurso, por dirección (tipo.nombre).
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ctplane.core.errors import ConfigError


STATE_FORMAT_VERSION = 1


class StateDiff:
    """Diferencia entre estado deseado y real (agnóstico de provider)."""
    def __init__(
        self,
        resource_id: str,
        field: str,
        desired: Any,
        actual: Any,
        severity: str = "warning"
    ):
        self.resource_id = resource_id
        self.field = field
        self.desired = desired
        self.actual = actual
        self.severity = severity  # "error", "warning", "info"

    def __repr__(self) -> str:
        return f"StateDiff({self.resource_id}.{self.field}: {self.actual!r} -> {self.desired!r})"


class ResourceState(BaseModel):
    """Instancia de un recurso en el estado local."""
    type: str = Field(..., description="Tipo de recurso (ej: commercetools_discount_code)")
    name: str = Field(..., description="Nombre lógico en el archivo declarativo")
    id: str = Field(..., description="ID remoto")
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"


class StateStore:
    """Lee y escribe el archivo de estado JSON."""

    def __init__(self, path: Path):
        self.path = path
        self._resources: Dict[str, ResourceState] = {}

    def load(self) -> "StateStore":
        """Carga el estado desde disco. Si no existe, queda vacío."""
        self._resources = {}
        if not self.path.exists():
            return self
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"No se pudo leer el estado {self.path}: {e}") from e

        version = data.get("version", STATE_FORMAT_VERSION)
        if version != STATE_FORMAT_VERSION:
            raise ConfigError(f"Versión de estado no soportada: {version}")
        for item in data.get("resources", []):
            rs = ResourceState(**item)
            self._resources[rs.address] = rs
        return self

    def save(self) -> None:
        """Persiste el estado (escritura atómica vía archivo temporal)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": STATE_FORMAT_VERSION,
            "resources": [rs.model_dump() for rs in self._resources.values()],
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=False, default=str)
            f.write("\n")
        tmp.replace(self.path)

    def get(self, address: str) -> Optional[ResourceState]:
        return self._resources.get(address)

    def put(self, resource: ResourceState) -> None:
        self._resources[resource.address] = resource

    def remove(self, address: str) -> None:
        self._resources.pop(address, None)

    def addresses(self) -> List[str]:
        return list(self._resources.keys())

    def resources(self) -> List[ResourceState]:
        return list(self._resources.values())
