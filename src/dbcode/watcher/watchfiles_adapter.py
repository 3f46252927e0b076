from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from watchfiles import Change, DefaultFilter, awatch

logger = logging.getLogger(__name__)


class CodeFileFilter(DefaultFilter):
    """watchfiles filter that lets through code files only.

    Editor swap files, VCS directories and the rest of ``DefaultFilter``'s
    ignore list stay ignored.
    """

    def __init__(self, extension: str = ".sql") -> None:
        super().__init__()
        self.extension = extension

    def __call__(self, change: Change, path: str) -> bool:
        return path.endswith(self.extension) and super().__call__(change, path)


class CodeWatcher:
    """Re-prepare the code schema whenever a file under the code root changes.

    Each batch that watchfiles reports runs *trigger* once, normally
    ``SchemaDeployer.prepare``, which is a no-op when the fingerprint did not
    move. A failed deploy is logged and the watcher waits for the next edit.
    """

    def __init__(
        self,
        directory: str | Path,
        trigger: Callable[[], Awaitable[Any]],
        extension: str = ".sql",
    ) -> None:
        self._directory = Path(directory)
        self._trigger = trigger
        self._filter = CodeFileFilter(extension)
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching code root %s for *%s changes", self._directory, self._filter.extension)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching code root %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory, watch_filter=self._filter):
            names = sorted(Path(p).name for _, p in changes)
            logger.info("%d code file(s) changed, re-preparing %s", len(names), self._directory)
            logger.debug("Changed: %s", ", ".join(names))
            try:
                await self._trigger()
            except Exception:
                logger.exception("Code schema was not redeployed; fix the files and save again")
