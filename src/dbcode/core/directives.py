import re

from dbcode.models import ParsedSource

_REQUIRE = re.compile(r"^\s*--\s*require\s+(?P<name>\S+)\s*$")


def parse_require(line: str) -> str | None:
    """Return the required name if *line* is a ``-- require <name>`` directive."""
    match = _REQUIRE.match(line)
    if match is None:
        return None
    return match.group("name")


def parse_directives(text: str) -> ParsedSource:
    """Split the leading directive header from the statement body.

    Only the header is scanned: the first line that is neither blank nor a
    directive ends it. Repeated requirements are kept once, in first-seen
    order. The body is returned exactly as it appears after the header.
    """
    requires: list[str] = []
    offset = 0
    for line in text.splitlines(keepends=True):
        if line.strip():
            name = parse_require(line)
            if name is None:
                break
            if name not in requires:
                requires.append(name)
        offset += len(line)
    if not requires:
        return ParsedSource(body=text)
    return ParsedSource(requires=tuple(requires), body=text[offset:])
