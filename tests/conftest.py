"""Shared fixtures and helpers for tests."""

import logging
import warnings
from collections.abc import Callable
from pathlib import Path

import pytest
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from dbcode.config import DBCodeConfig
from dbcode.core.deploy import SchemaDeployer
from dbcode.db import InMemoryCodeDatabase

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# PostgresTestBase: helpers for integration tests that need a database
# ---------------------------------------------------------------------------


class PostgresTestBase:
    IMAGE = "postgres:16-alpine"

    @staticmethod
    def create_container(image: str = IMAGE) -> DockerContainer:
        return DockerContainer(image).with_exposed_ports(5432).with_env("POSTGRES_PASSWORD", "postgres")

    @staticmethod
    def wait_for_postgres(container: DockerContainer) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DeprecationWarning)
            # The official image logs this line twice: once for the init
            # server and once for the real one.
            wait_for_logs(
                container,
                r"(?s)ready to accept connections.*ready to accept connections",
                timeout=60,
            )

    @staticmethod
    def connection_url(container: DockerContainer) -> str:
        host = container.get_container_host_ip()
        port = container.get_exposed_port(5432)
        return f"postgresql+asyncpg://postgres:postgres@{host}:{port}/postgres"


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

WriteCodeFile = Callable[[str, str], Path]


@pytest.fixture
def code_root(tmp_path: Path) -> Path:
    """Return an empty code directory."""
    root = tmp_path / "db" / "code"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def write_code_file(code_root: Path) -> WriteCodeFile:
    """Write ``<code_root>/<name>.sql`` and return its path."""

    def _write(name: str, contents: str) -> Path:
        path = code_root / f"{name}.sql"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(code_root: Path) -> DBCodeConfig:
    return DBCodeConfig(root=code_root)


@pytest.fixture
def in_memory_db() -> InMemoryCodeDatabase:
    return InMemoryCodeDatabase()


@pytest.fixture
def deployer(config: DBCodeConfig, in_memory_db: InMemoryCodeDatabase) -> SchemaDeployer:
    return SchemaDeployer(config, in_memory_db)
