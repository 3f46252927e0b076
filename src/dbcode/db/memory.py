import copy
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from sqlalchemy.exc import ProgrammingError

from dbcode.core.fingerprint import format_tag, parse_tag


@dataclass
class InMemorySchema:
    oid: int
    comment: str | None = None
    statements: list[str] = field(default_factory=list)


class InMemorySchemaTransaction:
    def __init__(self, db: "InMemoryCodeDatabase") -> None:
        self._db = db

    async def schema_exists(self, name: str) -> bool:
        return name in self._db.schemas

    async def create_schema(self, name: str) -> None:
        if name in self._db.schemas:
            raise ProgrammingError(f"CREATE SCHEMA {name}", None, Exception(f'schema "{name}" already exists'))
        self._db.schemas[name] = InMemorySchema(oid=self._db.next_oid())
        self._db.ddl.append(f"CREATE SCHEMA {name}")

    async def execute(self, sql: str, schema: str, active: str) -> None:
        self._db.ddl.append(sql)
        if self._db.fail_on is not None and self._db.fail_on(sql):
            raise ProgrammingError(sql, None, Exception("statement failed"))
        self._db.schemas[schema].statements.append(sql)
        self._db.hidden_schemas.add(active)

    async def tag_schema(self, name: str, fingerprint: str) -> None:
        self._db.schemas[name].comment = format_tag(fingerprint)
        self._db.ddl.append(f"COMMENT ON SCHEMA {name}")

    async def rename_schema(self, name: str, new_name: str) -> None:
        self._db.schemas[new_name] = self._db.schemas.pop(name)
        self._db.ddl.append(f"ALTER SCHEMA {name} RENAME TO {new_name}")

    async def drop_schema(self, name: str) -> None:
        del self._db.schemas[name]
        self._db.ddl.append(f"DROP SCHEMA {name} CASCADE")


class InMemoryCodeDatabase:
    """In-process stand-in for a database with transactional DDL.

    ``ddl`` records every statement issued, including rolled-back ones.
    ``fail_on`` makes matching statements raise like a database error.
    ``hidden_schemas`` collects the active schema names kept off the staging
    search path while bodies ran.
    """

    def __init__(self, fail_on: Callable[[str], bool] | None = None) -> None:
        self.schemas: dict[str, InMemorySchema] = {}
        self.ddl: list[str] = []
        self.fail_on = fail_on
        self.hidden_schemas: set[str] = set()
        self.search_path_entries = ['"$user"', "public"]
        self._oid = 16384

    def next_oid(self) -> int:
        self._oid += 1
        return self._oid

    async def active_fingerprint(self, schema: str) -> str | None:
        found = self.schemas.get(schema)
        return parse_tag(found.comment) if found else None

    async def schema_oid(self, schema: str) -> int | None:
        found = self.schemas.get(schema)
        return found.oid if found else None

    async def search_path(self) -> list[str]:
        return list(self.search_path_entries)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[InMemorySchemaTransaction]:
        snapshot = copy.deepcopy(self.schemas)
        try:
            yield InMemorySchemaTransaction(self)
        except BaseException:
            self.schemas = snapshot
            raise

    async def dispose(self) -> None:
        return None
