"""
Modelos del archivo declarativo (ctplane.yaml).
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


class ResourceConfig(BaseModel):
    """Un bloque de recurso del archivo declarativo"""
    type: str = Field(..., description="Tipo de recurso (ej: commercetools_discount_code)")
    name: str = Field(..., description="Nombre lógico, único por tipo")
    config: Dict[str, Any] = Field(default_factory=dict, description="Atributos deseados")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """El nombre forma parte de la dirección tipo.nombre"""
        if not v or not v.strip():
            raise ValueError("El nombre no puede estar vacío")
        if any(c in v for c in ". /\\"):
            raise ValueError("El nombre no puede contener '.', '/', '\\' ni espacios")
        return v

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"


class RootConfig(BaseModel):
    """Raíz del archivo declarativo"""
    version: int = Field(1, description="Versión del esquema")
    resources: List[ResourceConfig] = Field(default_factory=list)
