import logging
from pathlib import Path

from dbcode.errors import CodeRootNotFoundError
from dbcode.models import CodeFile

logger = logging.getLogger(__name__)


def code_file_name(path: Path, root: Path) -> str:
    """Logical name of *path*: relative to *root*, no extension, ``/`` separated."""
    return path.relative_to(root).with_suffix("").as_posix()


def list_code_files(root: str | Path, extension: str = ".sql") -> list[CodeFile]:
    """Read every code file below *root*.

    The result is sorted by name for stable output but callers must not rely on
    it for dependency order; that is the resolver's job.
    """
    root = Path(root)
    if not root.is_dir():
        raise CodeRootNotFoundError(root)

    files = [
        CodeFile(name=code_file_name(path, root), contents=path.read_bytes().decode("utf-8"))
        for path in root.rglob(f"*{extension}")
        if path.is_file()
    ]
    files.sort(key=lambda f: f.name)
    logger.debug("Found %d code file(s) in %s", len(files), root)
    return files
