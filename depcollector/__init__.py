"""depcollector: positional dependency extraction from project manifests."""

from depcollector.models import UNTRACKED, Dependency, Position, PositionedString
from depcollector.registry import DependencyCollector, collect_manifest, collector_for

__all__ = [
    "UNTRACKED",
    "Dependency",
    "DependencyCollector",
    "Position",
    "PositionedString",
    "collect_manifest",
    "collector_for",
]
