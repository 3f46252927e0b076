import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from dbcode.core.fingerprint import format_tag, parse_tag
from dbcode.db.engine import staging_search_path

logger = logging.getLogger(__name__)


class PostgresSchemaTransaction:
    """Schema DDL on one open connection; the caller owns the transaction."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn
        self._base_search_path: str | None = None

    def _quote(self, name: str) -> str:
        return self._conn.dialect.identifier_preparer.quote(name)

    async def schema_exists(self, name: str) -> bool:
        res = await self._conn.execute(
            text("SELECT count(*) FROM pg_catalog.pg_namespace WHERE nspname = :name"),
            {"name": name},
        )
        return int(res.scalar_one()) > 0

    async def create_schema(self, name: str) -> None:
        await self._conn.execute(text(f"CREATE SCHEMA {self._quote(name)}"))

    async def execute(self, sql: str, schema: str, active: str) -> None:
        """Run one code file's text with *schema* as the creation target.

        *active* and its siblings are taken off the search path, so a name the
        new schema lacks fails instead of binding to the schema being replaced.
        The text goes through the driver's simple-query protocol, which accepts
        several statements. The search path change is transaction-local.
        """
        if self._base_search_path is None:
            res = await self._conn.execute(text("SELECT current_setting('search_path')"))
            self._base_search_path = str(res.scalar_one())
        await self._conn.execute(
            text("SELECT set_config('search_path', :path, true)"),
            {"path": staging_search_path(self._base_search_path, self._quote(schema), active)},
        )
        raw = await self._conn.get_raw_connection()
        try:
            await raw.driver_connection.execute(sql)
        except asyncpg.PostgresError as exc:
            raise DBAPIError(sql, None, exc) from exc

    async def tag_schema(self, name: str, fingerprint: str) -> None:
        # COMMENT does not accept bind parameters; the tag is hex only.
        tag = format_tag(fingerprint).replace("'", "''")
        await self._conn.execute(text(f"COMMENT ON SCHEMA {self._quote(name)} IS '{tag}'"))

    async def rename_schema(self, name: str, new_name: str) -> None:
        await self._conn.execute(text(f"ALTER SCHEMA {self._quote(name)} RENAME TO {self._quote(new_name)}"))
        logger.debug("Renamed schema %s to %s", name, new_name)

    async def drop_schema(self, name: str) -> None:
        await self._conn.execute(text(f"DROP SCHEMA {self._quote(name)} CASCADE"))
        logger.debug("Dropped schema %s", name)


class PostgresCodeDatabase:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def active_fingerprint(self, schema: str) -> str | None:
        async with self._engine.connect() as conn:
            res = await conn.execute(
                text(
                    "SELECT obj_description(oid, 'pg_namespace') "
                    "FROM pg_catalog.pg_namespace WHERE nspname = :name"
                ),
                {"name": schema},
            )
            return parse_tag(res.scalar_one_or_none())

    async def schema_oid(self, schema: str) -> int | None:
        async with self._engine.connect() as conn:
            res = await conn.execute(
                text("SELECT oid FROM pg_catalog.pg_namespace WHERE nspname = :name"),
                {"name": schema},
            )
            oid = res.scalar_one_or_none()
            return int(oid) if oid is not None else None

    async def search_path(self) -> list[str]:
        async with self._engine.connect() as conn:
            res = await conn.execute(text("SELECT current_setting('search_path')"))
            return [p.strip().strip('"') for p in str(res.scalar_one()).split(",") if p.strip()]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PostgresSchemaTransaction]:
        async with self._engine.begin() as conn:
            yield PostgresSchemaTransaction(conn)

    async def dispose(self) -> None:
        await self._engine.dispose()
