"""CLI entry point: depcollector.

Usage:
    depcollector requirements.txt
    depcollector path/to/go.mod --go /usr/local/go/bin/go
    depcollector package.json --class dependencies --class devDependencies --json
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
import structlog

from depcollector.core.logging import setup_logging
from depcollector.exceptions import CollectorError
from depcollector.models import Dependency
from depcollector.parsers.go_mod import GomodDependencyCollector
from depcollector.registry import DependencyCollector, collector_for

log = structlog.get_logger("depcollector.cli")


def _build_collector(
    manifest: Path, classes: list[str] | None, go: str | None
) -> DependencyCollector:
    collector = collector_for(str(manifest), classes)
    if go and isinstance(collector, GomodDependencyCollector):
        collector.golang_executable = go
    return collector


def _print_deps(deps: list[Dependency], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([d.to_dict() for d in deps], indent=2))
        return

    if not deps:
        click.echo("No dependencies found.")
        return

    for d in deps:
        pos = d.version.position
        click.echo(f"{d.name.value} {d.version.value}  ({pos.line}:{pos.column})")


@click.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--go", default=None, help="Go executable (default: $DEPCOLLECTOR_GOLANG_EXECUTABLE or go)")
@click.option(
    "--class",
    "classes",
    multiple=True,
    help="package.json section to read (repeatable, default: dependencies)",
)
@click.option("--log-level", default=None, help="Log level (default: $DEPCOLLECTOR_LOG_LEVEL or INFO)")
def main(
    manifest: Path,
    as_json: bool,
    go: str | None,
    classes: tuple[str, ...],
    log_level: str | None,
) -> None:
    """Print the dependencies declared in MANIFEST with their positions."""
    setup_logging(level=log_level)
    manifest = manifest.resolve()
    contents = manifest.read_text(encoding="utf-8", errors="replace")

    try:
        collector = _build_collector(manifest, list(classes) or None, go)
        deps = asyncio.run(collector.collect(contents))
    except (CollectorError, json.JSONDecodeError) as e:
        log.error("cli.collect_failed", manifest=str(manifest), error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _print_deps(deps, as_json)


if __name__ == "__main__":
    main()
