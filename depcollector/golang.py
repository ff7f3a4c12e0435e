"""Go import listing for go.mod manifests."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

import structlog

from depcollector.core.config import get_settings
from depcollector.exceptions import GoCommandError, GoExecutableNotFoundError

log = structlog.get_logger("depcollector.golang")

# ``go list`` template printing one import path per line
_IMPORTS_TEMPLATE = '{{ join .Imports "\\n" }}'

# Shell convention for "command not found"
_EXIT_NOT_FOUND = 127


def manifest_workdir(manifest_uri: str) -> Path:
    """Return the directory holding *manifest_uri* (a path or ``file://`` URI)."""
    path = manifest_uri[len("file://"):] if manifest_uri.startswith("file://") else manifest_uri
    return Path(path).parent


def go_imports_cmd(executable: str) -> list[str]:
    return [executable, "list", "-f", _IMPORTS_TEMPLATE, "./..."]


async def list_go_imports(
    workdir: Path,
    executable: str | None = None,
    max_bytes: int | None = None,
) -> list[str]:
    """Run ``go list`` in *workdir* and return the imported package paths.

    Paths keep the order Go prints them in; duplicates and blank lines are
    dropped.

    Raises ``GoExecutableNotFoundError`` when the toolchain is missing and
    ``GoCommandError`` when *workdir* does not exist or the command fails.
    """
    settings = get_settings()
    executable = executable or settings.golang_executable
    max_bytes = max_bytes if max_bytes is not None else settings.go_list_max_bytes

    if not workdir.is_dir():
        log.warning("collector.go_workdir_missing", workdir=str(workdir))
        raise GoCommandError(executable)

    try:
        proc = await asyncio.create_subprocess_exec(
            *go_imports_cmd(executable),
            cwd=str(workdir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        if shutil.which(executable) is not None:
            raise GoCommandError(executable) from e
        raise GoExecutableNotFoundError(executable) from e

    stdout, stderr = await proc.communicate()
    if proc.returncode == _EXIT_NOT_FOUND:
        raise GoExecutableNotFoundError(executable)
    if proc.returncode != 0:
        log.warning(
            "collector.go_list_failed",
            workdir=str(workdir),
            exit_code=proc.returncode,
            stderr=stderr.decode(errors="replace").strip(),
        )
        raise GoCommandError(executable)
    if len(stdout) > max_bytes:
        log.warning(
            "collector.go_list_output_too_large",
            workdir=str(workdir),
            size=len(stdout),
            max_bytes=max_bytes,
        )
        raise GoCommandError(executable)

    lines = stdout.decode(errors="replace").split("\n")
    return list(dict.fromkeys(line.strip() for line in lines if line.strip()))
