from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from dbcode.config import DBCodeConfig


def append_to_search_path(search_path: str, schema: str) -> str:
    """Return *search_path* with *schema* as its last entry."""
    parts = [p.strip() for p in search_path.split(",") if p.strip()]
    parts = [p for p in parts if p.strip('"') != schema]
    return ", ".join([*parts, schema])


def staging_search_path(search_path: str, staging: str, active: str) -> str:
    """Search path for building *staging*: staging first, no code schemas.

    *active* and every ``<active>_*`` leftover are removed so that nothing in the
    new schema can come to depend on a schema that is about to be dropped.
    """
    parts = [p.strip() for p in search_path.split(",") if p.strip()]
    kept = [p for p in parts if p.strip('"') != active and not p.strip('"').startswith(f"{active}_")]
    return ", ".join([staging, *kept])


def install_search_path(engine: AsyncEngine, schema: str) -> None:
    """Put the code schema after the connection's default schemas.

    Unqualified names still resolve to code objects, but unqualified
    ``CREATE`` statements land in the application's own schema.
    """

    @event.listens_for(engine.sync_engine, "connect", insert=True)
    def _append_code_schema(dbapi_conn: Any, connection_record: Any) -> None:
        autocommit = dbapi_conn.autocommit
        dbapi_conn.autocommit = True
        cur = dbapi_conn.cursor()
        cur.execute("SHOW search_path")
        row = cur.fetchone()
        cur.execute(f"SET SESSION search_path = {append_to_search_path(row[0], schema)}")
        cur.close()
        dbapi_conn.autocommit = autocommit


def get_engine(config: DBCodeConfig | None = None) -> AsyncEngine:
    config = config or DBCodeConfig.from_env()
    engine = create_async_engine(config.database_url, future=True)
    install_search_path(engine, config.schema_name)
    return engine
