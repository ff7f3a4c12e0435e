"""Parser for Maven pom.xml files.

The POM is read with a recovering lxml pull parser, so broken markup and
undefined entities (``&nbsp;`` in a description) do not stop the scan.
lxml reports lines only; the column of each ``<version>`` value is found
in the source line.
"""

from __future__ import annotations

import re

import structlog
from lxml import etree

from depcollector.models import UNTRACKED, Dependency, Position
from depcollector.registry import register_collector

log = structlog.get_logger("depcollector.pom_xml")

_DEPENDENCY_TAG = "dependency"
_VERSION_TAG = "version"
_REQUIRED_FIELDS = ("groupId", "artifactId", "version")

# A <version> start tag, up to and including its closing '>'
_VERSION_OPEN_RE = re.compile(r"<version(?=[\s>/])[^>]*>")


def _local_name(element) -> str | None:
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _is_collectable(fields: dict[str, str]) -> bool:
    """A dependency needs coordinates and a version, and must not be test-scoped."""
    if not all(key in fields for key in _REQUIRED_FIELDS):
        return False
    if not fields["groupId"] or not fields["artifactId"]:
        return False
    return fields.get("scope") != "test"


class PomScanState:
    """Tracks the ``<dependency>`` element being read.

    ``in_dependency`` and ``pending_version_position`` follow the start and
    end events. Nested ``<dependency>`` elements are not supported: the
    outer one is emitted after the inner one and keeps the last version
    position seen.
    """

    def __init__(self, contents: str) -> None:
        self.dependencies: list[Dependency] = []
        self.in_dependency = False
        self.pending_version_position = UNTRACKED
        self._lines = contents.split("\n")
        self._versions_on_line: dict[int, int] = {}

    def version_position(self, line: int | None) -> Position:
        """1-based position of the first character after the n-th ``<version>`` tag on *line*."""
        if not line or line > len(self._lines):
            return UNTRACKED
        nth = self._versions_on_line.get(line, 0)
        self._versions_on_line[line] = nth + 1
        matches = list(_VERSION_OPEN_RE.finditer(self._lines[line - 1]))
        if nth >= len(matches):
            return Position(line=line, column=1)
        return Position(line=line, column=matches[nth].end() + 1)

    def handle(self, event: str, element) -> None:
        name = _local_name(element)
        if event == "start":
            if name == _DEPENDENCY_TAG:
                self.in_dependency = True
                self.pending_version_position = UNTRACKED
            elif name == _VERSION_TAG:
                # every <version> is counted so the n-th match on a line lines up
                position = self.version_position(element.sourceline)
                if self.in_dependency:
                    self.pending_version_position = position
        elif event == "end" and name == _DEPENDENCY_TAG:
            self.in_dependency = False
            self._emit(element)

    def _emit(self, element) -> None:
        fields: dict[str, str] = {}
        for child in element:
            child_name = _local_name(child)
            if child_name is not None:
                fields[child_name] = (child.text or "").strip()
        if not _is_collectable(fields):
            return
        self.dependencies.append(
            Dependency.build(
                f"{fields['groupId']}:{fields['artifactId']}",
                UNTRACKED,
                fields["version"],
                self.pending_version_position,
            )
        )


def parse_pom_xml(contents: str) -> list[Dependency]:
    """Extract ``groupId:artifactId`` dependencies from pom.xml text.

    Never raises on malformed XML; whatever the recovering parser could
    read is returned. Entities are not expanded and nothing is fetched
    over the network.
    """
    state = PomScanState(contents)
    parser = etree.XMLPullParser(
        events=("start", "end"),
        recover=True,
        resolve_entities=False,
        no_network=True,
    )
    for step in (lambda: parser.feed(contents.encode("utf-8")), parser.close):
        try:
            step()
        except etree.LxmlError as e:
            log.debug(
                "pom.parse_error_ignored",
                error=str(e),
                collected=len(state.dependencies),
            )
        for event, element in parser.read_events():
            state.handle(event, element)
    return state.dependencies


class PomXmlDependencyCollector:
    """Collect dependencies from a Maven pom.xml manifest."""

    def __init__(self, classes: list[str] | None = None) -> None:
        self.classes = ["dependencies"] if classes is None else classes

    async def collect(self, contents: str) -> list[Dependency]:
        return parse_pom_xml(contents)


register_collector(
    "maven-pom",
    ("pom.xml",),
    lambda _uri, classes: PomXmlDependencyCollector(classes),
)
