import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbcode.cli import options
from dbcode.errors import DBCodeError
from dbcode.models import DeployOutcome

console = Console()


def deploy(
    root: options.RootOption = None,
    schema: options.SchemaOption = None,
    force: Annotated[bool, typer.Option(help="Rebuild the schema even if nothing changed.")] = False,
) -> None:
    """Deploy the code files now, in any environment."""
    config = options.load_config(root, schema)
    deployer = options.get_deployer(config)

    async def _run() -> None:
        try:
            result = await deployer.deploy(force=force)
        finally:
            await deployer.database.dispose()

        if result.outcome is DeployOutcome.DEPLOYED:
            console.print(
                f"[green]Deployed[/green] {result.files} file(s) to schema {config.schema_name} "
                f"({result.fingerprint})"
            )
        elif result.outcome is DeployOutcome.NOOP:
            console.print(f"Schema {config.schema_name} is up to date ({result.fingerprint})")
        else:
            reason = result.reason.value if result.reason else "unknown"
            console.print(f"[yellow]Skipped[/yellow]: {reason.replace('_', ' ')}")
            raise typer.Exit(1)

    try:
        asyncio.run(_run())
    except DBCodeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc


def status(
    root: options.RootOption = None,
    schema: options.SchemaOption = None,
) -> None:
    """Compare the local code files with the deployed schema."""
    config = options.load_config(root, schema)
    deployer = options.get_deployer(config)

    async def _run() -> None:
        try:
            st = await deployer.status()
        finally:
            await deployer.database.dispose()

        table = Table(show_header=False)
        table.add_row("schema", st.schema_name)
        table.add_row("files", str(st.files))
        table.add_row("local fingerprint", st.local_fingerprint)
        table.add_row("active fingerprint", st.active_fingerprint or "-")
        table.add_row("active oid", str(st.active_oid) if st.active_oid is not None else "-")
        console.print(table)
        if st.up_to_date:
            console.print("[green]Up to date[/green]")
        else:
            console.print("[yellow]Deploy needed[/yellow]")

    try:
        asyncio.run(_run())
    except DBCodeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
