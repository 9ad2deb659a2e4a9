"""
Reconcile Engine: compara estado deseado (YAML) vs estado remoto y reconcilia.

Todas las operaciones son síncronas y secuenciales, un recurso a la vez.
Los errores de los handlers se convierten en diagnósticos; el estado se
persiste después de cada recurso.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ctplane.core.errors import ConfigError, CtplaneError, ProviderError
from ctplane.core.infra.contracts import PlanResult, ProviderContract, ResourceContract
from ctplane.core.infra.diagnostics import Diagnostic, Severity, from_error, has_errors
from ctplane.core.infra.schema import ResourceData, ResourceSchema
from ctplane.core.project.loader import DeclarativeLoader
from ctplane.core.project.planner import (
    ChangeAction,
    ResourceChange,
    plan_changes,
    plan_from_diffs,
)
from ctplane.core.project.validator import validate_address, validate_desired_config
from ctplane.core.runtime.state import ResourceState, StateStore


logger = logging.getLogger(__name__)


class ReconcileEngine:
    """Motor de reconciliación: plan / apply / destroy / import / refresh"""

    def __init__(
        self,
        provider: ProviderContract,
        store: StateStore,
        loader: Optional[DeclarativeLoader] = None,
        console: Optional[Console] = None,
    ):
        self.provider = provider
        self.store = store
        self.loader = loader
        self.console = console or Console()
        self._resources: Dict[str, ResourceContract] = provider.resources()
        self._client: Any = None

    @property
    def client(self) -> Any:
        """Cliente del provider, construido en el primer uso."""
        if self._client is None:
            self._client = self.provider.configure()
        return self._client

    def schemas(self) -> Dict[str, ResourceSchema]:
        return {name: r.schema for name, r in self._resources.items()}

    def _resource(self, type_name: str) -> ResourceContract:
        resource = self._resources.get(type_name)
        if resource is None:
            raise ConfigError(f"Tipo de recurso desconocido: {type_name}")
        return resource

    def validate(self) -> List[str]:
        """Carga el archivo declarativo y lo valida contra los esquemas."""
        if self.loader is None:
            raise ConfigError("No hay archivo declarativo configurado")
        self.loader.load()
        return validate_desired_config(self.loader.resources(), self.schemas())

    def refresh(self) -> List[Diagnostic]:
        """Lee cada recurso del estado desde el remoto y actualiza el estado local."""
        diagnostics: List[Diagnostic] = []
        for rs in self.store.resources():
            resource = self._resource(rs.type)
            d = ResourceData(resource.schema, rs.id, prior=rs.attributes)
            try:
                resource.read(d, self.client)
            except CtplaneError as e:
                diagnostics.append(from_error(e, rs.address))
                continue
            if not d.id:
                logger.info("%s ya no existe remotamente; se elimina del estado", rs.address)
                self.store.remove(rs.address)
            else:
                self.store.put(ResourceState(type=rs.type, name=rs.name, id=d.id, attributes=d.state()))
        self.store.save()
        return diagnostics

    def plan(self, refresh: bool = True) -> Tuple[List[ResourceChange], List[Diagnostic]]:
        """
        Calcula el plan de cambios.

        Returns:
            Tuple (cambios, diagnósticos)
        """
        errors = self.validate()
        if errors:
            return [], [Diagnostic(Severity.ERROR, msg) for msg in errors]

        diagnostics: List[Diagnostic] = []
        if refresh:
            diagnostics.extend(self.refresh())

        desired = {rc.address: rc.config for rc in self.loader.resources()}
        current = {rs.address: rs for rs in self.store.resources()}
        changes = plan_changes(desired, current, self.schemas())
        for change in changes:
            for diff in change.blocked:
                diagnostics.append(Diagnostic(
                    Severity.WARNING,
                    f"{diff.field}: no se puede modificar en un recurso existente "
                    f"({diff.actual!r} → {diff.desired!r}); se ignora",
                    detail="Elimine el recurso (destroy o quitándolo del archivo) y vuelva a crearlo",
                    address=change.address,
                ))
        return changes, diagnostics

    def apply(self, changes: List[ResourceChange]) -> List[Diagnostic]:
        """Ejecuta el plan en orden; un fallo no detiene el resto."""
        diagnostics: List[Diagnostic] = []
        for change in changes:
            if change.action == ChangeAction.NOOP:
                continue
            logger.info("%s: %s", change.address, change.action.value)
            try:
                if change.action == ChangeAction.CREATE:
                    self._apply_create(change)
                elif change.action == ChangeAction.UPDATE:
                    self._apply_update(change)
                elif change.action == ChangeAction.DELETE:
                    self._apply_delete(change.address)
            except CtplaneError as e:
                diagnostics.append(from_error(e, change.address))
            finally:
                self.store.save()
        return diagnostics

    def destroy(self) -> List[Diagnostic]:
        """
        Elimina todos los recursos del estado.

        Refresca antes de borrar: el delete usa la versión remota actual, y los
        recursos que ya no existen se quitan del estado sin llamada.
        """
        diagnostics = self.refresh()
        if has_errors(diagnostics):
            return diagnostics
        for address in list(reversed(self.store.addresses())):
            try:
                self._apply_delete(address)
            except CtplaneError as e:
                diagnostics.append(from_error(e, address))
            finally:
                self.store.save()
        return diagnostics

    def import_resource(self, address: str, remote_id: str) -> ResourceState:
        """Adopta un recurso remoto existente en la dirección dada."""
        validate_address(address)
        if self.store.get(address):
            raise ConfigError(f"{address} ya está en el estado")
        type_name, name = address.split(".")
        resource = self._resource(type_name)
        d = ResourceData(resource.schema, remote_id)
        resource.import_state(d, self.client)
        if not d.id:
            raise ProviderError(f"No existe un recurso remoto con ID {remote_id}")
        rs = ResourceState(type=type_name, name=name, id=d.id, attributes=d.state())
        self.store.put(rs)
        self.store.save()
        return rs

    def _apply_create(self, change: ResourceChange) -> None:
        resource = self._resource(change.type)
        d = ResourceData(resource.schema, config=change.config or {})
        try:
            resource.create(d, self.client)
        finally:
            # Creado remotamente aunque la lectura posterior falle
            if d.id:
                self.store.put(ResourceState(type=change.type, name=change.name, id=d.id, attributes=d.state()))

    def _apply_update(self, change: ResourceChange) -> None:
        resource = self._resource(change.type)
        rs = self.store.get(change.address)
        d = ResourceData(resource.schema, rs.id, prior=rs.attributes, config=change.config or {})
        resource.update(d, self.client)
        if not d.id:
            self.store.remove(change.address)
        else:
            self.store.put(ResourceState(type=rs.type, name=rs.name, id=d.id, attributes=d.state()))

    def _apply_delete(self, address: str) -> None:
        rs = self.store.get(address)
        if rs is None:
            return
        resource = self._resource(rs.type)
        d = ResourceData(resource.schema, rs.id, prior=rs.attributes)
        resource.delete(d, self.client)
        self.store.remove(address)

    def summarize(self, changes: List[ResourceChange]) -> PlanResult:
        """Resume el plan en acciones legibles."""
        actions: List[str] = []
        diffs = []
        counts = {action: 0 for action in ChangeAction}
        for change in changes:
            counts[change.action] += 1
            if change.action == ChangeAction.CREATE:
                actions.append(f"Crear {change.address}")
            elif change.action == ChangeAction.DELETE:
                actions.append(f"Eliminar {change.address}")
            elif change.action == ChangeAction.UPDATE:
                actions.extend(plan_from_diffs(change.diffs))
                diffs.extend(change.diffs)
        summary = (
            f"{counts[ChangeAction.CREATE]} a crear, "
            f"{counts[ChangeAction.UPDATE]} a actualizar, "
            f"{counts[ChangeAction.DELETE]} a eliminar"
        )
        return PlanResult(actions=actions, diffs=diffs, summary=summary)

    def display_plan(self, changes: List[ResourceChange]):
        """Muestra el plan en formato legible"""
        pending = [c for c in changes if c.action != ChangeAction.NOOP]
        if not pending:
            self.console.print("[green]✅ Sin cambios. Estado deseado y remoto coinciden.[/green]")
            return

        symbols = {
            ChangeAction.CREATE: "[green]+ crear[/green]",
            ChangeAction.UPDATE: "[yellow]~ actualizar[/yellow]",
            ChangeAction.DELETE: "[red]- eliminar[/red]",
        }
        for change in pending:
            table = Table(title=f"{change.address}  {symbols[change.action]}", show_header=True, header_style="bold")
            table.add_column("Campo", style="cyan")
            table.add_column("Actual", style="yellow")
            table.add_column("Deseado", style="green")
            if change.action == ChangeAction.CREATE:
                for key, value in sorted((change.config or {}).items()):
                    table.add_row(key, "", str(value))
            elif change.action == ChangeAction.UPDATE:
                for diff in change.diffs:
                    table.add_row(diff.field, str(diff.actual), str(diff.desired))
            self.console.print(table)
            self.console.print()

        self.console.print(f"[bold]Plan:[/bold] {self.summarize(changes).summary}")

    def display_diagnostics(self, diagnostics: List[Diagnostic]):
        """Muestra diagnósticos (errores y avisos)"""
        for diag in diagnostics:
            prefix = f"[cyan]{diag.address}[/cyan]: " if diag.address else ""
            if diag.severity == Severity.ERROR:
                self.console.print(f"[red]❌ {prefix}{escape(diag.summary)}[/red]")
            else:
                self.console.print(f"[yellow]⚠️ {prefix}{escape(diag.summary)}[/yellow]")
            if diag.detail:
                self.console.print(f"   [dim]{escape(diag.detail)}[/dim]")
