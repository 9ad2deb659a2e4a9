"""
Contratos que deben implementar los recursos de un provider.

El core solo define interfaces; la implementación vive en ctplane/commercetools/*.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol

from ctplane.core.runtime.state import StateDiff
from ctplane.core.infra.schema import ResourceData, ResourceSchema


# Handler CRUD: recibe los datos del recurso y el cliente configurado del provider
Handler = Callable[[ResourceData, Any], None]


class PlanResult:
    """Resultado de un plan (qué se aplicaría) sin ejecutar."""
    def __init__(
        self,
        actions: List[str],
        diffs: List[StateDiff],
        summary: str = ""
    ):
        self.actions = actions
        self.diffs = diffs
        self.summary = summary


class ResourceContract(Protocol):
    """
    Contrato mínimo de un tipo de recurso.
    Expone su esquema y los cuatro handlers de ciclo de vida.
    """
    @property
    def schema(self) -> ResourceSchema:
        ...

    def create(self, d: ResourceData, client: Any) -> None:
        """Crea el recurso remoto y escribe lo observado en d."""
        ...

    def read(self, d: ResourceData, client: Any) -> None:
        """Refresca d desde el remoto; d.set_id('') si ya no existe."""
        ...

    def update(self, d: ResourceData, client: Any) -> None:
        """Envía los cambios de d al remoto."""
        ...

    def delete(self, d: ResourceData, client: Any) -> None:
        """Elimina el recurso remoto."""
        ...

    def import_state(self, d: ResourceData, client: Any) -> None:
        """Adopta un recurso remoto existente por su ID."""
        ...


class Resource:
    """Implementación de ResourceContract a partir de funciones sueltas."""

    def __init__(
        self,
        schema: ResourceSchema,
        create: Handler,
        read: Handler,
        update: Handler,
        delete: Handler,
        importer: Optional[Handler] = None,
    ):
        self._schema = schema
        self._create = create
        self._read = read
        self._update = update
        self._delete = delete
        self._importer = importer

    @property
    def schema(self) -> ResourceSchema:
        return self._schema

    def create(self, d: ResourceData, client: Any) -> None:
        self._create(d, client)

    def read(self, d: ResourceData, client: Any) -> None:
        self._read(d, client)

    def update(self, d: ResourceData, client: Any) -> None:
        self._update(d, client)

    def delete(self, d: ResourceData, client: Any) -> None:
        self._delete(d, client)

    def import_state(self, d: ResourceData, client: Any) -> None:
        """Por defecto: passthrough, el ID dado se usa tal cual y se lee."""
        if self._importer:
            self._importer(d, client)
        else:
            self._read(d, client)


class ProviderContract(Protocol):
    """Un provider agrupa tipos de recurso y sabe construir su cliente."""
    @property
    def name(self) -> str:
        ...

    def resources(self) -> Dict[str, ResourceContract]:
        ...

    def configure(self) -> Any:
        """Devuelve el cliente que reciben los handlers."""
        ...
