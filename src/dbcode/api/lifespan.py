from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from dbcode.core.deploy import SchemaDeployer
from dbcode.watcher.watchfiles_adapter import CodeWatcher

logger = logging.getLogger(__name__)


def dbcode_lifespan(
    deployer: SchemaDeployer,
    watch: bool = False,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build a FastAPI lifespan that prepares the code schema on startup.

    With ``watch`` the code root is also watched and every change re-runs
    ``prepare``, the way a development server reloads.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        result = await deployer.prepare()
        logger.info("dbcode prepare: %s", result.outcome.value)
        watcher: CodeWatcher | None = None
        if watch:
            watcher = CodeWatcher(deployer.config.root, deployer.prepare, deployer.config.extension)
            await watcher.start()
        try:
            yield
        finally:
            if watcher is not None:
                await watcher.stop()
            await deployer.database.dispose()

    return lifespan
