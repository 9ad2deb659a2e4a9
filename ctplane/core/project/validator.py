"""
Validación de configuración y modelos (lógica pura).

Sin I/O; solo reglas sobre estructuras de datos ya cargadas.
"""

from typing import Dict, List

from ctplane.core.errors import ValidationError
from ctplane.core.infra.schema import ResourceSchema
from ctplane.core.project.models import ResourceConfig


def validate_address(address: str) -> None:
    """Valida que la dirección tenga la forma tipo.nombre."""
    if not address or address.count(".") != 1:
        raise ValidationError(f"Dirección inválida '{address}': se espera <tipo>.<nombre>")
    type_name, name = address.split(".")
    if not type_name or not name:
        raise ValidationError(f"Dirección inválida '{address}': se espera <tipo>.<nombre>")


def validate_desired_config(
    resources: List[ResourceConfig],
    schemas: Dict[str, ResourceSchema],
) -> List[str]:
    """
    Valida los recursos deseados contra los esquemas del provider.
    Devuelve lista de mensajes de error; si vacía, es válido.
    """
    errors: List[str] = []
    for rc in resources:
        schema = schemas.get(rc.type)
        if schema is None:
            errors.append(f"{rc.address}: tipo de recurso desconocido '{rc.type}'")
            continue
        for message in schema.validate_config(rc.config):
            errors.append(f"{rc.address}: {message}")
    return errors
