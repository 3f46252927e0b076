from __future__ import annotations

from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from dbcode.api.lifespan import dbcode_lifespan
from dbcode.core.deploy import SchemaDeployer
from dbcode.db import InMemoryCodeDatabase
from tests.conftest import WriteCodeFile


def test_startup_prepares_code_schema(
    deployer: SchemaDeployer, in_memory_db: InMemoryCodeDatabase, write_code_file: WriteCodeFile
) -> None:
    write_code_file("views/foo", "create view foo as select 1 as number")
    app = FastAPI(lifespan=dbcode_lifespan(deployer))

    with TestClient(app):
        assert in_memory_db.schemas["code"].statements == ["create view foo as select 1 as number"]


def test_watch_starts_and_stops_watcher(deployer: SchemaDeployer) -> None:
    app = FastAPI(lifespan=dbcode_lifespan(deployer, watch=True))

    with patch("dbcode.api.lifespan.CodeWatcher") as watcher_cls:
        watcher = watcher_cls.return_value
        watcher.start = _AsyncRecorder()
        watcher.stop = _AsyncRecorder()
        with TestClient(app):
            assert watcher.start.calls == 1
        assert watcher.stop.calls == 1

    args = watcher_cls.call_args[0]
    assert args[0] == deployer.config.root
    assert args[2] == ".sql"


class _AsyncRecorder:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1
