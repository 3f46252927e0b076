import asyncio
import contextlib

import typer
from rich.console import Console
from rich.markup import escape

from dbcode.cli import options
from dbcode.core.deploy import SchemaDeployer
from dbcode.errors import DBCodeError
from dbcode.watcher.watchfiles_adapter import CodeWatcher

console = Console()


async def _prepare_and_report(deployer: SchemaDeployer) -> None:
    try:
        result = await deployer.prepare()
    except DBCodeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return
    console.print(f"prepare: {result.outcome.value}" + (f" ({result.reason.value})" if result.reason else ""))


def watch(
    root: options.RootOption = None,
    schema: options.SchemaOption = None,
) -> None:
    """Prepare now and again whenever a code file changes."""
    config = options.load_config(root, schema)
    if not config.root.is_dir():
        console.print(f"[red]Code root directory does not exist: {config.root}[/red]")
        raise typer.Exit(1)
    deployer = options.get_deployer(config)

    async def _run() -> None:
        watcher = CodeWatcher(config.root, lambda: _prepare_and_report(deployer), config.extension)
        try:
            await _prepare_and_report(deployer)
            await watcher.start()
            console.print(f"[green]Watching[/green] {config.root} (Ctrl+C to stop)")
            await asyncio.Event().wait()
        finally:
            await watcher.stop()
            await deployer.database.dispose()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
