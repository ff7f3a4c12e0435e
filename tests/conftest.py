"""Shared pytest fixtures for depcollector tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def no_go(monkeypatch):
    """Point the Go executable at something that cannot exist."""
    monkeypatch.setenv("DEPCOLLECTOR_GOLANG_EXECUTABLE", "/nonexistent/go")
    return "/nonexistent/go"
