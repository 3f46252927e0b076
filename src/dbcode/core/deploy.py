"""Schema deployment engine.

A deploy builds a brand-new staging schema from the resolved code files and,
inside the same transaction, renames it over the active code schema. The
active schema is never altered in place, so readers see either the old or the
new set of objects and a failed deploy leaves nothing behind.
"""

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError

from dbcode.config import DBCodeConfig
from dbcode.core.files import list_code_files
from dbcode.core.fingerprint import compute_fingerprint
from dbcode.core.ports.database import CodeDatabase, SchemaTransaction
from dbcode.core.ports.migrations import MigrationChecker
from dbcode.core.resolver import resolve_order
from dbcode.errors import DeployFailedError
from dbcode.models import CodeFile, DeployOutcome, DeployResult, DeployStatus, ResolvedFile, SkipReason


class SchemaDeployer:
    def __init__(
        self,
        config: DBCodeConfig,
        database: CodeDatabase,
        migrations: MigrationChecker | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self._database = database
        self._migrations = migrations
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def database(self) -> CodeDatabase:
        return self._database

    def resolve(self) -> list[ResolvedFile]:
        """Read, parse and order the code files. No database access."""
        return resolve_order(list_code_files(self.config.root, self.config.extension))

    def list_files(self) -> list[CodeFile]:
        return [f.as_code_file() for f in self.resolve()]

    async def prepare(self) -> DeployResult:
        """Deploy if the code changed, unless a guard condition holds.

        This is the hook a host process calls on start and on every reload.
        Production environments are skipped; they deploy through ``deploy``.
        """
        return await self._run(check_environment=True, force=False)

    async def deploy(self, force: bool = False) -> DeployResult:
        """Release-time deploy: ignores the environment guard.

        With ``force`` the schema is rebuilt even when the fingerprint matches.
        """
        return await self._run(check_environment=False, force=force)

    async def status(self) -> DeployStatus:
        files = self.resolve()
        schema = self.config.schema_name
        return DeployStatus(
            schema_name=schema,
            local_fingerprint=compute_fingerprint(files),
            active_fingerprint=await self._database.active_fingerprint(schema),
            active_oid=await self._database.schema_oid(schema),
            files=len(files),
        )

    async def _run(self, check_environment: bool, force: bool) -> DeployResult:
        if self._migrations is not None and await self._migrations.is_pending():
            self._logger.info("dbcode: pending migrations, not deploying %s", self.config.schema_name)
            return DeployResult.skipped(SkipReason.PENDING_MIGRATIONS)
        if check_environment and self.config.is_production:
            self._logger.debug("dbcode: %s environment, not deploying on prepare", self.config.environment)
            return DeployResult.skipped(SkipReason.PRODUCTION_ENVIRONMENT)

        files = self.resolve()
        fingerprint = compute_fingerprint(files)
        current = await self._database.active_fingerprint(self.config.schema_name)

        if fingerprint == current and not force:
            self._logger.debug("dbcode: %s is up to date (%s)", self.config.schema_name, fingerprint[:12])
            return DeployResult(outcome=DeployOutcome.NOOP, fingerprint=fingerprint, files=len(files))

        self._logger.info(
            "dbcode: deploying %d file(s) to %s (%s -> %s)",
            len(files),
            self.config.schema_name,
            current[:12] if current else "none",
            fingerprint[:12],
        )
        try:
            async with self._database.transaction() as tx:
                await self._build_and_swap(tx, files, fingerprint)
        except SQLAlchemyError as exc:
            self._logger.error("dbcode: deploy of %s rolled back: %s", self.config.schema_name, exc)
            raise DeployFailedError(exc) from exc
        except DeployFailedError as exc:
            self._logger.error("dbcode: deploy of %s rolled back at %s", self.config.schema_name, exc.file_name)
            raise

        return DeployResult(outcome=DeployOutcome.DEPLOYED, fingerprint=fingerprint, files=len(files))

    async def _build_and_swap(self, tx: SchemaTransaction, files: list[ResolvedFile], fingerprint: str) -> None:
        active = self.config.schema_name
        staging = await self._unused_name(tx, active)
        await tx.create_schema(staging)

        for f in files:
            if not f.body.strip():
                continue
            try:
                await tx.execute(f.body, staging, active)
            except SQLAlchemyError as exc:
                raise DeployFailedError(exc, f.name) from exc

        await tx.tag_schema(staging, fingerprint)

        retired: str | None = None
        if await tx.schema_exists(active):
            retired = await self._unused_name(tx, f"{active}_old")
            await tx.rename_schema(active, retired)
        await tx.rename_schema(staging, active)
        if retired is not None:
            await tx.drop_schema(retired)

    @staticmethod
    async def _unused_name(tx: SchemaTransaction, prefix: str) -> str:
        while True:
            name = f"{prefix}_{uuid.uuid4().hex[:12]}"
            if not await tx.schema_exists(name):
                return name
