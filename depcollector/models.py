"""Data models shared by every manifest parser."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Position:
    """A line/column location inside the manifest text."""

    line: int
    column: int


# Name positions that are not tracked (requirements.txt, pom.xml).
UNTRACKED = Position(line=0, column=0)


@dataclass(frozen=True)
class PositionedString:
    value: str
    position: Position


@dataclass(frozen=True)
class Dependency:
    """A single declared dependency with the source location of its parts."""

    name: PositionedString
    version: PositionedString

    @classmethod
    def build(
        cls,
        name: str,
        name_position: Position,
        version: str,
        version_position: Position,
    ) -> Dependency:
        return cls(
            name=PositionedString(name, name_position),
            version=PositionedString(version, version_position),
        )

    def to_dict(self) -> dict:
        return asdict(self)
