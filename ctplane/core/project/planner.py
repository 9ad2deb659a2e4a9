"""
Planificación: genera un plan de cambios (qué aplicar) sin ejecutar.

Lógica pura: entrada = estado deseado + estado actual (estructuras);
salida = lista de cambios por recurso. La ejecución la hace el engine.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from ctplane.core.infra.schema import ResourceSchema
from ctplane.core.runtime.state import ResourceState, StateDiff


class ChangeAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"


class ResourceChange:
    """Cambio planificado para una dirección tipo.nombre"""
    def __init__(
        self,
        address: str,
        action: ChangeAction,
        diffs: Optional[List[StateDiff]] = None,
        config: Optional[Dict[str, Any]] = None,
        blocked: Optional[List[StateDiff]] = None,
    ):
        self.address = address
        self.action = action
        self.diffs = diffs or []
        self.config = config
        # Diferencias en campos inmutables: no se pueden aplicar con un update
        self.blocked = blocked or []

    @property
    def type(self) -> str:
        return self.address.split(".", 1)[0]

    @property
    def name(self) -> str:
        return self.address.split(".", 1)[1]

    def __repr__(self) -> str:
        return f"ResourceChange({self.address}, {self.action.value}, {len(self.diffs)} diffs)"


def compute_diffs(
    address: str,
    schema: ResourceSchema,
    prior: Dict[str, Any],
    desired: Dict[str, Any],
) -> List[StateDiff]:
    """Compara atributos previos vs deseados (normalizados) campo a campo."""
    normalized = schema.normalize(desired)
    diffs: List[StateDiff] = []
    for key, value in normalized.items():
        fs = schema.fields[key]
        actual = prior.get(key)
        if actual is None:
            actual = fs.zero_value()
        if actual != value:
            severity = "error" if fs.required else "warning"
            diffs.append(StateDiff(address, key, value, actual, severity))
    return diffs


def plan_changes(
    desired: Dict[str, Dict[str, Any]],
    current: Dict[str, ResourceState],
    schemas: Dict[str, ResourceSchema],
) -> List[ResourceChange]:
    """
    Calcula el plan.

    Args:
        desired: dirección → config deseada
        current: dirección → estado local (ya refrescado)
        schemas: tipo → esquema

    Returns:
        Cambios en orden: primero los del archivo declarativo (en su orden), luego las eliminaciones.
        Las diferencias en campos inmutables quedan en ResourceChange.blocked.
    """
    changes: List[ResourceChange] = []
    for address, config in desired.items():
        type_name = address.split(".", 1)[0]
        state = current.get(address)
        if state is None:
            changes.append(ResourceChange(address, ChangeAction.CREATE, config=config))
            continue
        schema = schemas[type_name]
        diffs = compute_diffs(address, schema, state.attributes, config)
        blocked = [d for d in diffs if schema.fields[d.field].immutable]
        diffs = [d for d in diffs if not schema.fields[d.field].immutable]
        action = ChangeAction.UPDATE if diffs else ChangeAction.NOOP
        changes.append(ResourceChange(address, action, diffs=diffs, config=config, blocked=blocked))

    for address in current:
        if address not in desired:
            changes.append(ResourceChange(address, ChangeAction.DELETE))
    return changes


def plan_from_diffs(diffs: List[StateDiff]) -> List[str]:
    """
    Convierte una lista de StateDiff en acciones legibles (para mostrar en CLI).
    No ejecuta nada.
    """
    actions: List[str] = []
    for d in diffs:
        if d.desired != d.actual:
            actions.append(f"Actualizar {d.resource_id}.{d.field}: {d.actual!r} → {d.desired!r}")
    return actions
