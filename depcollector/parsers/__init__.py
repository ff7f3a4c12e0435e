"""Manifest collectors: auto-registered on import."""

from depcollector.parsers import (
    go_mod,  # noqa: F401
    package_json,  # noqa: F401
    pom_xml,  # noqa: F401
    requirements_txt,  # noqa: F401
)
