import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from dbcode.cli.deploy import deploy, status
from dbcode.cli.files import files
from dbcode.cli.watch import watch

app = typer.Typer(
    name="dbcode",
    help="dbcode CLI: deploy SQL code objects into a swappable schema.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log deploy steps.")] = False,
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )


app.command("deploy")(deploy)
app.command("status")(status)
app.command("files")(files)
app.command("watch")(watch)


def main() -> None:
    app()
