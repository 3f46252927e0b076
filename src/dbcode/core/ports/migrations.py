from typing import Protocol


class MigrationChecker(Protocol):
    async def is_pending(self) -> bool: ...
