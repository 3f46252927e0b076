from pathlib import Path
from typing import Annotated

import typer

from dbcode.config import DBCodeConfig
from dbcode.core.deploy import SchemaDeployer

RootOption = Annotated[Path | None, typer.Option("--root", help="Code directory (default: $DBCODE_ROOT or db/code).")]
SchemaOption = Annotated[str | None, typer.Option("--schema", help="Code schema name (default: code).")]


def load_config(root: Path | None = None, schema: str | None = None) -> DBCodeConfig:
    return DBCodeConfig.from_env(root=root, schema_name=schema)


def get_deployer(config: DBCodeConfig) -> SchemaDeployer:
    from dbcode.bootstrap import build_deployer

    return build_deployer(config)
