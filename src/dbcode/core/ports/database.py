from contextlib import AbstractAsyncContextManager
from typing import Protocol


class SchemaTransaction(Protocol):
    """Schema-level DDL inside one database transaction.

    Leaving the transaction's context with an exception rolls back every
    operation issued through it.
    """

    async def schema_exists(self, name: str) -> bool: ...

    async def create_schema(self, name: str) -> None: ...

    async def execute(self, sql: str, schema: str, active: str) -> None: ...

    async def tag_schema(self, name: str, fingerprint: str) -> None: ...

    async def rename_schema(self, name: str, new_name: str) -> None: ...

    async def drop_schema(self, name: str) -> None: ...


class CodeDatabase(Protocol):
    async def active_fingerprint(self, schema: str) -> str | None: ...

    async def schema_oid(self, schema: str) -> int | None: ...

    async def search_path(self) -> list[str]: ...

    def transaction(self) -> AbstractAsyncContextManager[SchemaTransaction]: ...

    async def dispose(self) -> None: ...
