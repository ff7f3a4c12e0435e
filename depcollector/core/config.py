"""Environment-driven settings for the collectors."""

from __future__ import annotations

import os
from dataclasses import dataclass

_ENV_GOLANG_EXECUTABLE = "DEPCOLLECTOR_GOLANG_EXECUTABLE"
_ENV_GO_LIST_MAX_BYTES = "DEPCOLLECTOR_GO_LIST_MAX_BYTES"
_ENV_LOG_LEVEL = "DEPCOLLECTOR_LOG_LEVEL"
_ENV_LOG_FORMAT = "DEPCOLLECTOR_LOG_FORMAT"

# 1200 KiB, the stdout cap for ``go list``
_DEFAULT_GO_LIST_MAX_BYTES = 1024 * 1200


@dataclass(frozen=True)
class Settings:
    golang_executable: str = "go"
    go_list_max_bytes: int = _DEFAULT_GO_LIST_MAX_BYTES
    log_level: str = "INFO"
    log_format: str = "console"


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


def get_settings() -> Settings:
    """Read settings from the environment.

    Reads from environment variables:
        DEPCOLLECTOR_GOLANG_EXECUTABLE - Go toolchain (default: go)
        DEPCOLLECTOR_GO_LIST_MAX_BYTES - ``go list`` output cap (default: 1228800)
        DEPCOLLECTOR_LOG_LEVEL         - log level (default: INFO)
        DEPCOLLECTOR_LOG_FORMAT        - console | json (default: console)
    """
    return Settings(
        golang_executable=os.environ.get(_ENV_GOLANG_EXECUTABLE, "go"),
        go_list_max_bytes=_env_int(_ENV_GO_LIST_MAX_BYTES, _DEFAULT_GO_LIST_MAX_BYTES),
        log_level=os.environ.get(_ENV_LOG_LEVEL, "INFO").upper(),
        log_format=os.environ.get(_ENV_LOG_FORMAT, "console").lower(),
    )
