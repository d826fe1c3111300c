"""
Shared pytest fixtures for the mindmode test suite.

Usage in tests:
    def test_something(map_factory):
        document = map_factory.create_document(select="tasks")
        ...

    def test_with_registry(registry):
        # fresh registry of built-in commands per test
        assert "center" in registry
"""

import pytest

from mindmode.commands import build_registry
from tests.factories import MindMapTestFactory


@pytest.fixture
def map_factory(tmp_path):
    """
    Create a MindMapTestFactory bound to a temp directory.

    Example:
        def test_save(map_factory):
            path = map_factory.write_map()
    """
    return MindMapTestFactory(tmp_path)


@pytest.fixture
def document(map_factory):
    """Sample document with "tasks" selected, in normal mode."""
    return map_factory.create_document(select="tasks")


@pytest.fixture
def registry():
    """Fresh registry holding every built-in command."""
    return build_registry()


@pytest.fixture
def interpreter(map_factory):
    """Interpreter over a fresh built-in registry."""
    return map_factory.create_interpreter()


@pytest.fixture
def handlers(map_factory):
    """Handler mocks over the sample forest."""
    return map_factory.create_handlers()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config, env overrides and cwd out of every test."""
    from mindmode.config import ConfigManager
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", tmp_path / "user-home")
    monkeypatch.delenv("MINDMODE_MODE", raising=False)
    monkeypatch.delenv("MINDMODE_SYMBOLS", raising=False)
    monkeypatch.chdir(tmp_path)
