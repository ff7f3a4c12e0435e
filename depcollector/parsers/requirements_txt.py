"""Parser for pip requirements.txt files."""

from __future__ import annotations

import re

from depcollector.models import UNTRACKED, Dependency, Position
from depcollector.registry import register_collector

# Any run of the characters making up ``==``, ``,``, ``>=`` and ``<=``.
# Not a requirement-specifier grammar: ``~=``, ``!=`` and extras are not split.
_SPECIFIER_SPLIT_RE = re.compile(r"[=,><]+")


def split_requirement(line: str) -> tuple[str, str]:
    """Split a comment-free requirement line into ``(name, version)``.

    Both parts are trimmed; the version is empty when the line has no
    specifier.
    """
    parts = _SPECIFIER_SPLIT_RE.split(line)
    name = parts[0].strip()
    version = parts[1].strip() if len(parts) > 1 else ""
    return name, version


def parse_requirements(contents: str) -> list[Dependency]:
    """Extract dependencies from requirements.txt text.

    Name positions are not tracked and carry ``UNTRACKED``. The version
    column is the 1-based index of the version in the line; a missing
    version matches at index 0, so its column is 1.
    """
    deps: list[Dependency] = []
    for index, line in enumerate(contents.split("\n")):
        if "#" in line:
            line = line.split("#")[0]
        name, version = split_requirement(line)
        if not name:
            continue
        deps.append(
            Dependency.build(
                name,
                UNTRACKED,
                version,
                Position(line=index + 1, column=line.find(version) + 1),
            )
        )
    return deps


class ReqDependencyCollector:
    """Collect dependencies from a requirements.txt manifest."""

    def __init__(self, classes: list[str] | None = None) -> None:
        self.classes = ["dependencies"] if classes is None else classes

    async def collect(self, contents: str) -> list[Dependency]:
        return parse_requirements(contents)


register_collector(
    "requirements",
    ("requirements.txt",),
    lambda _uri, classes: ReqDependencyCollector(classes),
)
