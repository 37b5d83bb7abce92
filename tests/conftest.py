"""Pytest fixtures for orchestrator configuration tests."""

import pytest
from pathlib import Path

from sonarorchestrator.config import ProcessSources


@pytest.fixture
def user_home() -> Path:
    """The real user home, as used for default directories."""
    return Path.home()


@pytest.fixture
def sources(user_home):
    """Process sources with no environment and only ``user.home`` set."""
    return ProcessSources(environ={}, system_properties={"user.home": str(user_home)})


@pytest.fixture
def make_sources(user_home):
    """Factory for process sources with given env vars and system properties."""
    def _make(environ=None, system_properties=None):
        props = {"user.home": str(user_home)}
        props.update(system_properties or {})
        return ProcessSources(environ=environ or {}, system_properties=props)
    return _make


@pytest.fixture
def properties_file(tmp_path):
    """Write a properties file and return its path."""
    def _write(content: str, name: str = "orchestrator.properties") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
