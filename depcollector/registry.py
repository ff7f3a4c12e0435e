"""Collector registry: match manifest files to dependency collectors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

from depcollector.exceptions import UnsupportedManifestError
from depcollector.models import Dependency


@runtime_checkable
class DependencyCollector(Protocol):
    """Interface that every manifest collector must satisfy."""

    classes: list[str]

    async def collect(self, contents: str) -> list[Dependency]: ...


# (manifest_uri, classes) -> collector
CollectorFactory = Callable[[str, list[str] | None], DependencyCollector]


@dataclass(frozen=True)
class CollectorSpec:
    manifest_type: str
    file_names: tuple[str, ...]
    factory: CollectorFactory


COLLECTOR_REGISTRY: dict[str, CollectorSpec] = {}


def register_collector(
    manifest_type: str,
    file_names: tuple[str, ...],
    factory: CollectorFactory,
) -> None:
    """Register a collector factory by its manifest type."""
    COLLECTOR_REGISTRY[manifest_type] = CollectorSpec(manifest_type, file_names, factory)


def collector_for(
    manifest_uri: str,
    classes: list[str] | None = None,
) -> DependencyCollector:
    """Build the collector for *manifest_uri*, chosen by its file name.

    Raises ``UnsupportedManifestError`` when no collector handles the file.
    """
    # Ensure collectors are registered before lookup.
    import depcollector.parsers  # noqa: F401

    file_name = PurePosixPath(manifest_uri.replace("\\", "/")).name
    for spec in COLLECTOR_REGISTRY.values():
        if file_name in spec.file_names:
            return spec.factory(manifest_uri, classes)
    raise UnsupportedManifestError(file_name or manifest_uri)


async def collect_manifest(
    manifest_uri: str,
    contents: str,
    classes: list[str] | None = None,
) -> list[Dependency]:
    """Select the collector for *manifest_uri* and collect from *contents*."""
    return await collector_for(manifest_uri, classes).collect(contents)
