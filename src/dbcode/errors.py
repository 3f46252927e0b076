"""Errors raised by the deployment engine.

Every failure leaves the previously active code schema in place.
"""

from collections.abc import Sequence
from pathlib import Path


class DBCodeError(Exception):
    """Base class for all dbcode errors."""


class CodeRootNotFoundError(DBCodeError):
    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"Code root directory does not exist: {root}")


class UnresolvedDependencyError(DBCodeError):
    def __init__(self, name: str, referrer: str) -> None:
        self.name = name
        self.referrer = referrer
        super().__init__(f"{referrer} requires {name}, which does not exist")


class CyclicDependencyError(DBCodeError):
    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__("Cyclic dependency: " + " -> ".join(self.cycle))


class DeployFailedError(DBCodeError):
    """The build/swap transaction failed and was rolled back.

    ``file_name`` is set when a code file's statement was the failing step;
    the original database error is kept as ``cause`` and ``__cause__``.
    """

    def __init__(self, cause: BaseException, file_name: str | None = None) -> None:
        self.cause = cause
        self.file_name = file_name
        where = f" while executing {file_name}" if file_name else ""
        super().__init__(f"Deploy failed{where}: {cause}")
