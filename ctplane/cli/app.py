"""
Aplicación CLI de ctplane.

Solo compone comandos; la lógica vive en core (engine) y en el provider commercetools.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from ctplane import __version__
from ctplane.commercetools.config import load_env_file
from ctplane.commercetools.provider import CommercetoolsProvider
from ctplane.core.errors import CtplaneError
from ctplane.core.infra.diagnostics import Diagnostic, has_errors
from ctplane.core.project.engine import ReconcileEngine
from ctplane.core.project.loader import DeclarativeLoader
from ctplane.core.project.planner import ChangeAction
from ctplane.core.runtime.resolver import config_path, project_base, state_path
from ctplane.core.runtime.state import StateStore
from ctplane.logging_config import configure_logging


app = typer.Typer(
    name="ctplane",
    help="ctplane - Control plane declarativo para commercetools",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

# Reemplazable en tests para inyectar una sesión HTTP falsa
provider_factory = CommercetoolsProvider


class _Options:
    config: Optional[Path] = None
    state: Optional[Path] = None


_options = _Options()


@app.callback()
def main_callback(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Archivo declarativo (default: ctplane.yaml)"),
    state: Optional[Path] = typer.Option(None, "--state", "-s", help="Archivo de estado (default: .ctplane/state.json)"),
    debug: bool = typer.Option(False, "--debug", help="Logging en nivel DEBUG"),
):
    """Opciones globales"""
    load_env_file(project_base())
    configure_logging("DEBUG" if debug else None)
    _options.config = config
    _options.state = state


def _engine(with_config: bool = True) -> ReconcileEngine:
    store = StateStore(state_path(_options.state)).load()
    loader = DeclarativeLoader(config_path(_options.config)) if with_config else None
    return ReconcileEngine(provider_factory(), store, loader=loader, console=console)


def _fail(error: Exception):
    console.print(f"[red]❌ {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


def _report(engine: ReconcileEngine, diagnostics: List[Diagnostic]):
    engine.display_diagnostics(diagnostics)
    if has_errors(diagnostics):
        raise typer.Exit(code=1)


@app.command()
def version():
    """Muestra la versión de ctplane"""
    console.print(Panel.fit(
        "[bold cyan]ctplane[/bold cyan]\n"
        "[dim]Control plane declarativo para commercetools[/dim]\n\n"
        f"[bold]Versión:[/bold] {__version__}\n"
        "[bold]Recursos:[/bold] commercetools_discount_code",
        border_style="cyan"
    ))


@app.command()
def info():
    """Muestra los comandos disponibles"""
    table = Table(title="Comandos", show_header=True, header_style="bold cyan")
    table.add_column("Comando", style="cyan", width=10)
    table.add_column("Descripción", style="green")
    table.add_row("validate", "Valida el archivo declarativo contra los esquemas")
    table.add_row("plan", "Muestra los cambios que se aplicarían")
    table.add_row("apply", "Aplica los cambios (create/update/delete)")
    table.add_row("destroy", "Elimina todos los recursos del estado")
    table.add_row("import", "Adopta un recurso remoto existente")
    table.add_row("refresh", "Refresca el estado desde la API")
    table.add_row("show", "Muestra el estado local")
    table.add_row("schema", "Muestra el esquema de un tipo de recurso")
    console.print(table)


@app.command()
def schema(
    type_name: str = typer.Argument("commercetools_discount_code", help="Tipo de recurso"),
):
    """Muestra el esquema de un tipo de recurso"""
    resources = provider_factory().resources()
    resource = resources.get(type_name)
    if resource is None:
        _fail(CtplaneError(f"Tipo de recurso desconocido: {type_name}"))

    sch = resource.schema
    console.print(Panel(sch.description or type_name, title=f"[bold cyan]{type_name}[/bold cyan]", border_style="cyan"))
    table = Table(show_header=True, header_style="bold")
    table.add_column("Campo", style="cyan")
    table.add_column("Tipo", style="green")
    table.add_column("Modo", style="yellow")
    table.add_column("Default")
    table.add_column("Descripción", style="dim")
    for key, fs in sch.fields.items():
        type_label = fs.type.value if not fs.elem else f"{fs.type.value}({fs.elem.value})"
        default = "" if fs.default is None else str(fs.default).lower()
        mode = f"{fs.mode}, inmutable" if fs.immutable else fs.mode
        table.add_row(key, type_label, mode, default, fs.description)
    console.print(table)


@app.command()
def validate():
    """Valida el archivo declarativo"""
    try:
        errors = _engine().validate()
    except CtplaneError as e:
        _fail(e)
    if errors:
        for msg in errors:
            console.print(f"[red]❌ {escape(msg)}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]✅ Configuración válida[/green]")


@app.command()
def plan(
    refresh: bool = typer.Option(True, "--refresh/--no-refresh", help="Refrescar el estado antes de planificar"),
):
    """Muestra los cambios que se aplicarían (sin ejecutar)"""
    try:
        engine = _engine()
        changes, diagnostics = engine.plan(refresh=refresh)
    except CtplaneError as e:
        _fail(e)
    _report(engine, diagnostics)
    engine.display_plan(changes)


@app.command()
def apply(
    auto_approve: bool = typer.Option(False, "--auto-approve", "-y", help="No pedir confirmación"),
):
    """Aplica el estado deseado"""
    try:
        engine = _engine()
        changes, diagnostics = engine.plan()
    except CtplaneError as e:
        _fail(e)
    _report(engine, diagnostics)
    engine.display_plan(changes)

    if all(c.action == ChangeAction.NOOP for c in changes):
        return
    if not auto_approve and not Confirm.ask("¿Aplicar estos cambios?", default=False):
        console.print("[yellow]Cancelado[/yellow]")
        raise typer.Exit(code=1)

    try:
        diagnostics = engine.apply(changes)
    except CtplaneError as e:
        _fail(e)
    _report(engine, diagnostics)
    console.print(f"[green]✅ Aplicado:[/green] {engine.summarize(changes).summary}")


@app.command()
def destroy(
    auto_approve: bool = typer.Option(False, "--auto-approve", "-y", help="No pedir confirmación"),
):
    """Elimina todos los recursos gestionados"""
    try:
        engine = _engine(with_config=False)
    except CtplaneError as e:
        _fail(e)
    addresses = engine.store.addresses()
    if not addresses:
        console.print("[green]✅ No hay recursos en el estado[/green]")
        return
    for address in addresses:
        console.print(f"  [red]- eliminar[/red] {address}")
    if not auto_approve and not Confirm.ask(f"¿Eliminar {len(addresses)} recursos?", default=False):
        console.print("[yellow]Cancelado[/yellow]")
        raise typer.Exit(code=1)

    try:
        diagnostics = engine.destroy()
    except CtplaneError as e:
        _fail(e)
    _report(engine, diagnostics)
    removed = len(addresses) - len(engine.store.addresses())
    console.print(f"[green]✅ Eliminados {removed} recursos[/green]")


@app.command("import")
def import_resource(
    address: str = typer.Argument(..., help="Dirección <tipo>.<nombre>"),
    remote_id: str = typer.Argument(..., help="ID remoto del recurso"),
):
    """Adopta un recurso remoto existente en el estado"""
    try:
        rs = _engine(with_config=False).import_resource(address, remote_id)
    except CtplaneError as e:
        _fail(e)
    console.print(f"[green]✅ Importado[/green] {rs.address} [dim](id={rs.id})[/dim]")


@app.command()
def refresh():
    """Refresca el estado local desde la API"""
    try:
        engine = _engine(with_config=False)
        diagnostics = engine.refresh()
    except CtplaneError as e:
        _fail(e)
    _report(engine, diagnostics)
    console.print(f"[green]✅ Estado refrescado ({len(engine.store.addresses())} recursos)[/green]")


@app.command()
def show():
    """Muestra el estado local"""
    try:
        store = StateStore(state_path(_options.state)).load()
    except CtplaneError as e:
        _fail(e)
    resources = store.resources()
    if not resources:
        console.print("[dim]Estado vacío[/dim]")
        return
    for rs in resources:
        table = Table(title=f"{rs.address} [dim](id={rs.id})[/dim]", show_header=True, header_style="bold")
        table.add_column("Atributo", style="cyan")
        table.add_column("Valor", style="green")
        for key, value in rs.attributes.items():
            table.add_row(key, str(value))
        console.print(table)


def main():
    app()
