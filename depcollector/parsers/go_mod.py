"""Parser for Go go.mod files.

Module versions are read line by line from the manifest, then reconciled
with the package imports Go reports for the module so that packages used
from inside a required module are reported too (``pkg@module``).
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path

import structlog

from depcollector.core.config import get_settings
from depcollector.golang import list_go_imports, manifest_workdir
from depcollector.models import UNTRACKED, Dependency, Position
from depcollector.registry import register_collector

log = structlog.get_logger("depcollector.go_mod")

# Semantic version at the start of the line or after whitespace, with an
# optional ``v`` prefix that is not part of the captured version.
_SEMVER_RE = re.compile(
    r"(?:^|(?<=\s))v?"
    r"(?P<version>"
    r"(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)"
    r"(?:-(?:0|[1-9]\d*|[\da-z-]*[a-z-][\da-z-]*)(?:\.(?:0|[1-9]\d*|[\da-z-]*[a-z-][\da-z-]*))*)?"
    r"(?:\+[\da-z-]+(?:\.[\da-z-]+)*)?"
    r")(?=$|\s)",
    re.IGNORECASE,
)

ImportLister = Callable[[Path], Awaitable[Iterable[str]]]


def find_version(line: str) -> re.Match[str] | None:
    """Return the first semver-shaped match in *line*, or None.

    Only ``major.minor.patch`` versions are recognised; Go pseudo-versions
    match through their pre-release part.
    """
    return _SEMVER_RE.search(line)


def parse_go_mod_modules(contents: str) -> list[Dependency]:
    """Extract the required modules (direct and indirect) from go.mod text.

    Lines with ``=>`` (replace directives) and lines without a version are
    skipped. The version column is the 0-based index of the version
    digits, after any ``v`` prefix. Module name positions are not tracked.
    """
    deps: list[Dependency] = []
    for index, line in enumerate(contents.split("\n")):
        if "=>" in line:
            continue
        if "//" in line:
            line = line.split("//")[0]
        m = find_version(line)
        if m is None:
            continue
        parts = line.replace("require", "", 1).replace("(", "", 1).replace(")", "", 1).split()
        if not parts:
            continue
        deps.append(
            Dependency.build(
                parts[0],
                UNTRACKED,
                "v" + m.group("version"),
                Position(line=index + 1, column=m.start("version")),
            )
        )
    return deps


def _module_for_import(import_path: str, modules: list[Dependency]) -> Dependency | None:
    """Return the module providing *import_path* through a sub-package.

    None when the import is a module itself or no module contains it. Of
    several containing modules the longest name wins; on equal length the
    one listed last wins.
    """
    match: Dependency | None = None
    for module in modules:
        name = module.name.value
        if import_path == name:
            return None
        if import_path.startswith(name + "/"):
            if match is None or len(name) >= len(match.name.value):
                match = module
    return match


def parse_go_mod(contents: str, imports: Iterable[str]) -> list[Dependency]:
    """Extract go.mod dependencies reconciled with the imported packages.

    Returns the modules in file order followed by one ``import@module``
    entry per import that lives inside a required module, in *imports*
    order. The synthetic entries share the module's version and positions.
    """
    modules = parse_go_mod_modules(contents)
    packages: list[Dependency] = []
    for import_path in imports:
        module = _module_for_import(import_path, modules)
        if module is None:
            continue
        packages.append(
            Dependency.build(
                f"{import_path}@{module.name.value}",
                module.name.position,
                module.version.value,
                module.version.position,
            )
        )
    return modules + packages


class GomodDependencyCollector:
    """Collect dependencies from a go.mod manifest.

    *manifest_file* is the path or ``file://`` URI of the go.mod; ``go
    list`` runs in its directory. *list_imports* replaces the ``go list``
    call, e.g. in tests.
    """

    def __init__(
        self,
        manifest_file: str,
        classes: list[str] | None = None,
        *,
        golang_executable: str | None = None,
        list_imports: ImportLister | None = None,
    ) -> None:
        self.manifest_file = manifest_file
        self.classes = ["dependencies"] if classes is None else classes
        self.golang_executable = golang_executable or get_settings().golang_executable
        self._list_imports = list_imports or self._go_list

    async def _go_list(self, workdir: Path) -> Iterable[str]:
        return await list_go_imports(workdir, self.golang_executable)

    async def collect(self, contents: str) -> list[Dependency]:
        workdir = manifest_workdir(self.manifest_file)
        imports = await self._list_imports(workdir)
        deps = parse_go_mod(contents, imports)
        log.debug("collector.go_mod_collected", workdir=str(workdir), count=len(deps))
        return deps


register_collector(
    "go-mod",
    ("go.mod",),
    lambda uri, classes: GomodDependencyCollector(uri, classes),
)
