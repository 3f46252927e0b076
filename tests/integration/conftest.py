"""Session-scoped fixtures for integration tests."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from testcontainers.core.container import DockerContainer

from dbcode.config import DBCodeConfig
from dbcode.core.deploy import SchemaDeployer
from dbcode.db import PostgresCodeDatabase, get_engine
from tests.conftest import PostgresTestBase


@pytest.fixture(scope="session")
def postgres_container() -> Generator[DockerContainer, None, None]:
    """Start a PostgreSQL container for the session."""
    container = PostgresTestBase.create_container()
    container.start()
    PostgresTestBase.wait_for_postgres(container)
    yield container
    container.stop()


@pytest.fixture(scope="session")
def test_db_url(postgres_container: DockerContainer) -> str:
    return PostgresTestBase.connection_url(postgres_container)


@pytest.fixture
def pg_config(code_root: Path, test_db_url: str) -> DBCodeConfig:
    return DBCodeConfig(root=code_root, database_url=test_db_url)


@pytest_asyncio.fixture
async def engine(pg_config: DBCodeConfig) -> AsyncGenerator[AsyncEngine, None]:
    """Per-test engine; drops everything the test created afterwards."""
    engine = get_engine(pg_config)
    yield engine
    async with engine.begin() as conn:
        res = await conn.execute(
            text("SELECT nspname FROM pg_catalog.pg_namespace WHERE nspname = 'code' OR nspname LIKE 'code\\_%'")
        )
        for (name,) in res.all():
            await conn.execute(text(f'DROP SCHEMA "{name}" CASCADE'))
        await conn.execute(text("DROP TABLE IF EXISTS public.foos, public.alembic_version"))
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> PostgresCodeDatabase:
    return PostgresCodeDatabase(engine)


@pytest_asyncio.fixture
async def pg_deployer(pg_config: DBCodeConfig, db: PostgresCodeDatabase) -> SchemaDeployer:
    return SchemaDeployer(pg_config, db)
