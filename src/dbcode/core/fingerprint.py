import hashlib
from collections.abc import Iterable

from dbcode.models import CodeFile, ResolvedFile

FINGERPRINT_PREFIX = "dbcode:"


def compute_fingerprint(files: Iterable[CodeFile | ResolvedFile]) -> str:
    """SHA-256 over each file's name and contents, in the given order.

    Both fields are length-prefixed so no two distinct file lists can produce
    the same byte stream.
    """
    h = hashlib.sha256()
    for f in files:
        name = f.name.encode("utf-8")
        contents = f.contents.encode("utf-8")
        h.update(b"N|%d|" % len(name) + name)
        h.update(b"|C|%d|" % len(contents) + contents)
    return h.hexdigest()


def format_tag(fingerprint: str) -> str:
    return FINGERPRINT_PREFIX + fingerprint


def parse_tag(tag: str | None) -> str | None:
    """Extract the fingerprint from a schema comment, ignoring foreign comments."""
    if not tag or not tag.startswith(FINGERPRINT_PREFIX):
        return None
    return tag[len(FINGERPRINT_PREFIX) :] or None
