"""
Shared pytest fixtures for the Sprig test suite.

Every test gets a private user config location and a clean SPRIG_*
environment, so nothing from the developer's machine leaks in.

Usage in tests:
    def test_something(sprig_factory):
        sprig_factory.commit("first", {"a.txt": "hello"})

    def test_with_repo(repo):
        repo.status()
"""

import pytest

from sprig.config import ConfigManager
from tests.factories import SprigTestFactory


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point user config at tmp_path and drop SPRIG_* variables."""
    user_dir = tmp_path / "home" / ".sprig"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    for var in ("SPRIG_DEFAULT_BRANCH", "SPRIG_SYMBOLS", "SPRIG_LOG_LEVEL",
                "SPRIG_PROJECT_PATH", "SPRIG_ASCII_ONLY"):
        monkeypatch.delenv(var, raising=False)
    return user_dir


@pytest.fixture
def sprig_factory(tmp_path):
    """
    Fresh repository on branch main holding only the initial commit.

    Example:
        def test_log(sprig_factory):
            sprig_factory.commit("one", {"a.txt": "1"})
            assert len(sprig_factory.repo.log()) == 2
    """
    return SprigTestFactory(tmp_path)


@pytest.fixture
def repo(sprig_factory):
    """The Repository handle of sprig_factory."""
    return sprig_factory.repo
