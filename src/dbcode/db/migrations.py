import logging
from pathlib import Path

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def load_alembic_config(ini_path: str | Path) -> Config:
    return Config(str(ini_path))


def _current_heads(conn: Connection) -> set[str]:
    return set(MigrationContext.configure(conn).get_current_heads())


class AlembicMigrationChecker:
    """Reports pending migrations when the database is not at the script heads."""

    def __init__(self, engine: AsyncEngine, alembic_config: Config) -> None:
        self._engine = engine
        self._config = alembic_config

    async def is_pending(self) -> bool:
        expected = set(ScriptDirectory.from_config(self._config).get_heads())
        async with self._engine.connect() as conn:
            current = await conn.run_sync(_current_heads)
        if current != expected:
            logger.info("Migrations pending: database at %s, scripts at %s", sorted(current), sorted(expected))
            return True
        return False


class NoMigrationChecker:
    """For hosts that do not manage their structural schema with alembic."""

    async def is_pending(self) -> bool:
        return False
