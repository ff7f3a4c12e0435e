"""Tests for the ``go list`` import listing helper."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from depcollector.exceptions import (
    CollectorError,
    GoCommandError,
    GoExecutableNotFoundError,
    GoToolchainError,
)
from depcollector.golang import go_imports_cmd, list_go_imports, manifest_workdir


def _fake_proc(returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


class TestManifestWorkdir:
    def test_file_uri(self):
        assert manifest_workdir("file:///home/dev/app/go.mod") == Path("/home/dev/app")

    def test_plain_path(self):
        assert manifest_workdir("/home/dev/app/go.mod") == Path("/home/dev/app")


class TestListGoImports:
    def test_command(self):
        assert go_imports_cmd("go") == ["go", "list", "-f", '{{ join .Imports "\\n" }}', "./..."]

    @pytest.mark.asyncio
    async def test_success_dedupes_and_drops_blank_lines(self, tmp_path):
        proc = _fake_proc(0, stdout=b"fmt\nexample.com/foo/bar\n\nfmt\nos\n")
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ) as spawn:
            imports = await list_go_imports(tmp_path, "go")

        assert imports == ["fmt", "example.com/foo/bar", "os"]
        args, kwargs = spawn.call_args
        assert list(args) == go_imports_cmd("go")
        assert kwargs["cwd"] == str(tmp_path)

    @pytest.mark.asyncio
    async def test_exit_127_means_toolchain_not_found(self, tmp_path):
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_fake_proc(127)),
        ):
            with pytest.raises(GoExecutableNotFoundError) as exc_info:
                await list_go_imports(tmp_path, "/opt/go/bin/go")
        assert str(exc_info.value) == "Unable to locate '/opt/go/bin/go'"
        assert exc_info.value.executable == "/opt/go/bin/go"

    @pytest.mark.asyncio
    async def test_spawn_failure_means_toolchain_not_found(self, tmp_path):
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("go")),
        ), patch("depcollector.golang.shutil.which", return_value=None):
            with pytest.raises(GoExecutableNotFoundError):
                await list_go_imports(tmp_path, "go")

    @pytest.mark.asyncio
    async def test_other_exit_means_command_failed(self, tmp_path):
        proc = _fake_proc(1, stderr=b"go: updates to go.mod needed")
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            with pytest.raises(GoCommandError) as exc_info:
                await list_go_imports(tmp_path, "go")
        assert str(exc_info.value) == (
            "Unable to execute 'go list' command, run 'go mod tidy' to know more"
        )

    @pytest.mark.asyncio
    async def test_oversized_output_is_a_command_failure(self, tmp_path):
        proc = _fake_proc(0, stdout=b"x" * 64)
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            with pytest.raises(GoCommandError):
                await list_go_imports(tmp_path, "go", max_bytes=16)

    @pytest.mark.asyncio
    async def test_executable_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DEPCOLLECTOR_GOLANG_EXECUTABLE", "go1.22")
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(return_value=_fake_proc(0, stdout=b"fmt\n")),
        ) as spawn:
            await list_go_imports(tmp_path)
        assert spawn.call_args.args[0] == "go1.22"

    @pytest.mark.asyncio
    async def test_missing_workdir_is_a_command_failure(self, tmp_path):
        spawn = AsyncMock()
        with patch("depcollector.golang.asyncio.create_subprocess_exec", spawn):
            with pytest.raises(GoCommandError):
                await list_go_imports(tmp_path / "gone", "go")
        spawn.assert_not_called()

    @pytest.mark.asyncio
    async def test_spawn_failure_with_resolvable_go_is_a_command_failure(self, tmp_path):
        with patch(
            "depcollector.golang.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("go")),
        ), patch("depcollector.golang.shutil.which", return_value="/usr/bin/go"):
            with pytest.raises(GoCommandError):
                await list_go_imports(tmp_path, "go")

    def test_error_hierarchy(self):
        assert issubclass(GoExecutableNotFoundError, GoToolchainError)
        assert issubclass(GoCommandError, GoToolchainError)
        assert issubclass(GoToolchainError, CollectorError)
        assert not issubclass(GoCommandError, GoExecutableNotFoundError)
