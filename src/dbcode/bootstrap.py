import logging

from dbcode.config import DBCodeConfig
from dbcode.core.deploy import SchemaDeployer
from dbcode.core.ports.migrations import MigrationChecker
from dbcode.db.engine import get_engine
from dbcode.db.migrations import AlembicMigrationChecker, NoMigrationChecker, load_alembic_config
from dbcode.db.postgres import PostgresCodeDatabase


def build_deployer(config: DBCodeConfig | None = None, logger: logging.Logger | None = None) -> SchemaDeployer:
    """Wire a Postgres-backed deployer from *config*.

    Pending migrations are checked with alembic when the configured ini file
    exists; otherwise the migration guard never triggers.
    """
    config = config or DBCodeConfig.from_env()
    engine = get_engine(config)
    migrations: MigrationChecker
    if config.alembic_config.is_file():
        migrations = AlembicMigrationChecker(engine, load_alembic_config(config.alembic_config))
    else:
        migrations = NoMigrationChecker()
    return SchemaDeployer(config, PostgresCodeDatabase(engine), migrations, logger=logger)
