"""Pytest configuration and fixtures for content-lock tests"""
import logging

import pytest

from content_lock.locks import InMemoryUserDirectory, LockManager, Resource, User


class FakeClock:
    """Deterministic replacement for time.time"""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def alice():
    return User("alice", "alice@example.com")


@pytest.fixture
def bob():
    return User("bob", "bob@example.com")


@pytest.fixture
def carol():
    return User("carol", "carol@example.com")


@pytest.fixture
def users(alice, bob, carol):
    """User directory knowing alice, bob and carol"""
    return InMemoryUserDirectory({u.id: u.email for u in (alice, bob, carol)})


@pytest.fixture
def content_dir(tmp_path):
    """Empty content directory shared by all items of a test"""
    directory = tmp_path / "content" / "blog"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def lock_file(content_dir):
    return content_dir / ".lock"


@pytest.fixture
def make_manager(content_dir, users, clock):
    """Factory for managers over the shared content directory"""

    def _make(item: str = "blog/hello", *, config=None, directory=None) -> LockManager:
        return LockManager(
            Resource(item, directory or content_dir),
            users=users,
            config=config,
            clock=clock,
        )

    return _make


@pytest.fixture
def restore_root_logging():
    """Undo setup_logging() changes to the root logger after a test"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
