import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbcode.cli import options
from dbcode.core.files import list_code_files
from dbcode.core.resolver import resolve_order
from dbcode.errors import DBCodeError

console = Console()


def files(
    root: options.RootOption = None,
) -> None:
    """List the code files in deploy order."""
    config = options.load_config(root)
    try:
        ordered = resolve_order(list_code_files(config.root, config.extension))
    except DBCodeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    table = Table(show_lines=False)
    table.add_column("#")
    table.add_column("name")
    table.add_column("requires")
    for i, f in enumerate(ordered, start=1):
        table.add_row(str(i), f.name, ", ".join(f.requires))
    console.print(table)
    console.print(f"({len(ordered)} files)")
