from collections.abc import Iterable

from dbcode.core.directives import parse_directives
from dbcode.errors import CyclicDependencyError, UnresolvedDependencyError
from dbcode.models import CodeFile, ResolvedFile


def parse_files(files: Iterable[CodeFile]) -> dict[str, ResolvedFile]:
    parsed: dict[str, ResolvedFile] = {}
    for f in files:
        source = parse_directives(f.contents)
        parsed[f.name] = ResolvedFile(name=f.name, contents=f.contents, requires=source.requires, body=source.body)
    return parsed


def resolve_order(files: Iterable[CodeFile]) -> list[ResolvedFile]:
    """Order *files* so that every required file precedes its requirer.

    Depth-first over names in lexicographic order, visiting requirements in the
    order they are declared, so a given file set always yields the same list.
    Missing requirements are reported before any cycle.
    """
    parsed = parse_files(files)

    for name in sorted(parsed):
        for required in parsed[name].requires:
            if required not in parsed:
                raise UnresolvedDependencyError(required, name)

    ordered: list[ResolvedFile] = []
    done: set[str] = set()

    for start in sorted(parsed):
        if start in done:
            continue
        path = [start]
        on_path = {start}
        stack = [iter(parsed[start].requires)]
        while stack:
            required = next(stack[-1], None)
            if required is None:
                name = path.pop()
                on_path.discard(name)
                stack.pop()
                done.add(name)
                ordered.append(parsed[name])
            elif required in on_path:
                raise CyclicDependencyError([*path[path.index(required) :], required])
            elif required not in done:
                path.append(required)
                on_path.add(required)
                stack.append(iter(parsed[required].requires))
    return ordered
