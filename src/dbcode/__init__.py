from dbcode.config import DBCodeConfig
from dbcode.core.deploy import SchemaDeployer
from dbcode.core.directives import parse_directives
from dbcode.core.files import list_code_files
from dbcode.core.fingerprint import compute_fingerprint
from dbcode.core.resolver import resolve_order
from dbcode.errors import (
    CodeRootNotFoundError,
    CyclicDependencyError,
    DBCodeError,
    DeployFailedError,
    UnresolvedDependencyError,
)
from dbcode.models import CodeFile, DeployOutcome, DeployResult, DeployStatus, ResolvedFile, SkipReason

__all__ = [
    "CodeFile",
    "CodeRootNotFoundError",
    "CyclicDependencyError",
    "DBCodeConfig",
    "DBCodeError",
    "DeployFailedError",
    "DeployOutcome",
    "DeployResult",
    "DeployStatus",
    "ResolvedFile",
    "SchemaDeployer",
    "SkipReason",
    "UnresolvedDependencyError",
    "compute_fingerprint",
    "list_code_files",
    "parse_directives",
    "resolve_order",
]
