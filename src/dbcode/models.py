from enum import Enum

from pydantic import BaseModel, ConfigDict


class CodeFile(BaseModel):
    """A code file as read from disk: logical name and raw contents."""

    model_config = ConfigDict(frozen=True)

    name: str
    contents: str


class ParsedSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    requires: tuple[str, ...] = ()
    body: str


class ResolvedFile(BaseModel):
    """A code file with its directives split from the executable body."""

    model_config = ConfigDict(frozen=True)

    name: str
    contents: str
    requires: tuple[str, ...] = ()
    body: str

    def as_code_file(self) -> CodeFile:
        return CodeFile(name=self.name, contents=self.contents)


class DeployOutcome(str, Enum):
    NOOP = "noop"
    DEPLOYED = "deployed"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    PENDING_MIGRATIONS = "pending_migrations"
    PRODUCTION_ENVIRONMENT = "production_environment"


class DeployResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: DeployOutcome
    fingerprint: str | None = None
    reason: SkipReason | None = None
    files: int = 0

    @classmethod
    def skipped(cls, reason: SkipReason) -> "DeployResult":
        return cls(outcome=DeployOutcome.SKIPPED, reason=reason)


class DeployStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_name: str
    local_fingerprint: str
    active_fingerprint: str | None = None
    active_oid: int | None = None
    files: int = 0

    @property
    def up_to_date(self) -> bool:
        return self.local_fingerprint == self.active_fingerprint
