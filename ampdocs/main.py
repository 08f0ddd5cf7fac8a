"""ampdocs CLI - inspect a documentation export from the terminal."""
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ampdocs.config import __version__, get_config
from ampdocs.model.entities import Class_, File, Function_, Hook
from ampdocs.model.errors import AmpdocsError
from ampdocs.model.graph import DocumentGraph
from ampdocs.model.leaf import LeafEntity
from ampdocs.model.loader import load_export
from ampdocs.utils.logger import safe_print
from ampdocs.utils.safe_console import SafeConsole

app = typer.Typer(
    name="ampdocs",
    help="Inspect the plugin's reference documentation export",
    add_completion=False
)
console = SafeConsole()


def _load(export: Optional[str]) -> Tuple[DocumentGraph, List[LeafEntity]]:
    """Load an export and build its root entities.

    Args:
        export: Export path, or None for the configured default

    Returns:
        Tuple of (graph builder, root entities)
    """
    try:
        config = get_config()
    except ValueError as e:
        console.error(str(e))
        raise typer.Exit(1)

    export_path = Path(export) if export else config.export_path

    if not export_path.exists():
        console.error(f"Export file does not exist: {export_path}")
        raise typer.Exit(1)

    try:
        records = load_export(export_path)
        graph = DocumentGraph()
        roots = graph.build_all(records, kind=config.root_kind)
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)

    return graph, roots


def _description(entity: LeafEntity) -> str:
    doc = entity.get('doc')
    if doc is None:
        return ''
    return doc.get('description') or ''


@app.command()
def summary(
    export: Optional[str] = typer.Argument(None, help="Documentation export (JSON)"),
):
    """List files with their function, class and hook counts."""
    _, roots = _load(export)

    table = Table(title="Documentation Export")
    table.add_column("File", style="cyan")
    table.add_column("Functions", justify="right", style="green")
    table.add_column("Classes", justify="right", style="green")
    table.add_column("Hooks", justify="right", style="green")

    try:
        for root in roots:
            if not isinstance(root, File):
                table.add_row(escape(str(root.label())), "-", "-", "-")
                continue
            table.add_row(
                escape(str(root.get('path'))),
                str(len(root.get('functions'))),
                str(len(root.get('classes'))),
                str(len(root.get('hooks'))),
            )
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)

    console.print(table)
    console.print(f"\n[bold]Total files:[/bold] {len(roots)}")


@app.command()
def show(
    name: str = typer.Argument(..., help="Qualified name (e.g. Foo\\bar or Foo::baz)"),
    export: Optional[str] = typer.Argument(None, help="Documentation export (JSON)"),
):
    """Show one documented function, method or class."""
    graph, roots = _load(export)

    try:
        declarations = graph.index(roots)
        entity = declarations.get(name)
        if entity is None:
            console.error(f"No function, method or class named {name}")
            raise typer.Exit(1)

        heading = entity.signature() if isinstance(entity, Function_) else entity.qualified_name()
        body = escape(_description(entity)) or "[dim]No description[/dim]"
        doc = entity.get('doc')
        if doc is not None:
            if doc.since():
                body += f"\n\n[bold]Since:[/bold] {escape(doc.since())}"
            if doc.is_deprecated():
                body += "\n[bold red]Deprecated[/bold red]"
        console.print(Panel(body, title=escape(heading), title_align="left"))

        if isinstance(entity, Function_):
            arguments = entity.get('arguments')
            if arguments:
                table = Table(title="Arguments")
                table.add_column("Name", style="cyan")
                table.add_column("Type", style="magenta")
                table.add_column("Default")
                for argument in arguments.values():
                    table.add_row(
                        escape(argument.get('name') or ''),
                        escape(argument.get('type') or ''),
                        escape(str(argument.get('default') or '')),
                    )
                console.print(table)

            for hook in entity.get('hooks').values():
                console.print(f"  [yellow]{escape(hook.get('type') or 'hook')}[/yellow] {escape(hook.get('name'))}")

        elif isinstance(entity, Class_):
            for method in entity.get('methods').values():
                console.print(f"  [cyan]{escape(method.signature())}[/cyan]")
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)


@app.command()
def hooks(
    export: Optional[str] = typer.Argument(None, help="Documentation export (JSON)"),
):
    """List every hook and where it is fired."""
    graph, roots = _load(export)

    table = Table(title="Hooks")
    table.add_column("Hook", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Fired in")
    table.add_column("Line", justify="right")

    count = 0
    try:
        for root in roots:
            for _, entity in graph.walk(root, include_usages=False):
                if not isinstance(entity, Hook):
                    continue
                owner = entity.ancestor(Function_)
                where = owner.qualified_name() if owner is not None else entity.root_entity().label()
                table.add_row(
                    escape(entity.get('name') or ''),
                    escape(entity.get('type') or ''),
                    escape(str(where or '')),
                    str(entity.get('line') or ''),
                )
                count += 1
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)

    if not count:
        console.warning("No hooks found")
        return
    console.print(table)


@app.command()
def usages(
    name: str = typer.Argument(..., help="Qualified name of a function or method"),
    export: Optional[str] = typer.Argument(None, help="Documentation export (JSON)"),
):
    """Show what a symbol calls and what calls it."""
    graph, roots = _load(export)

    try:
        calls = graph.usage_graph(roots)
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)

    if name not in calls:
        console.error(f"{name} does not appear in the usage graph")
        raise typer.Exit(1)

    callers = sorted(calls.predecessors(name))
    callees = sorted(calls.successors(name))

    console.print(f"[bold blue]{escape(name)}[/bold blue]")
    console.print(f"\n[bold]Called by ({len(callers)}):[/bold]")
    for caller in callers:
        console.print(f"  ← {escape(caller)}")
    console.print(f"\n[bold]Calls ({len(callees)}):[/bold]")
    for callee in callees:
        marker = "" if calls.nodes[callee].get('declared') else " [dim](external)[/dim]"
        console.print(f"  → {escape(callee)}{marker}")


@app.command()
def dump(
    name: str = typer.Argument(..., help="Qualified name of a function, method or class"),
    export: Optional[str] = typer.Argument(None, help="Documentation export (JSON)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Levels of children to expand (defaults to AMPDOCS_MAX_DEPTH)"),
):
    """Print the resolved fields of a symbol as JSON."""
    graph, roots = _load(export)

    if depth is None:
        depth = get_config().max_depth

    try:
        entity = graph.index(roots).get(name)
        if entity is None:
            console.error(f"No function, method or class named {name}")
            raise typer.Exit(1)
        data = entity.to_dict(depth)
    except AmpdocsError as e:
        console.error(str(e))
        raise typer.Exit(1)

    console.print_json(data=data)


@app.command()
def version():
    """Print the ampdocs version."""
    safe_print(f"ampdocs {__version__}")


if __name__ == "__main__":
    app()
