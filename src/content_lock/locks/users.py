"""Caller identity seam.

The lock manager never looks up an ambient "current user". Callers pass
their identity explicitly; a ``UserDirectory`` tells the manager whether a
stored lock owner still exists and what their email is.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import yaml

from content_lock.core.exceptions import ConfigurationError, NotAuthenticatedError


@dataclass(frozen=True)
class User:
    id: str
    email: str | None = None


class UserDirectory(Protocol):
    """Resolves stored user ids to live users."""

    def find(self, user_id: str) -> User | None:
        """Return the user, or None if the account no longer exists."""


class InMemoryUserDirectory:
    """UserDirectory backed by a plain ``{id: email}`` mapping."""

    def __init__(self, users: Mapping[str, str | None] | None = None):
        self._users = dict(users or {})

    def add(self, user: User) -> None:
        self._users[user.id] = user.email

    def remove(self, user_id: str) -> None:
        self._users.pop(user_id, None)

    def find(self, user_id: str) -> User | None:
        if user_id not in self._users:
            return None
        return User(id=user_id, email=self._users[user_id])


class OpenUserDirectory:
    """UserDirectory that treats every non-empty id as an existing user."""

    def find(self, user_id: str) -> User | None:
        if not user_id:
            return None
        return User(id=user_id)


def load_user_directory(path: Path) -> InMemoryUserDirectory:
    """Load a ``{id: email}`` mapping from a YAML or JSON file."""
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read users file '{path}'", field="users", details=str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Users file '{path}' must map user ids to emails", field="users")
    return InMemoryUserDirectory({str(k): (None if v is None else str(v)) for k, v in data.items()})


@dataclass(frozen=True)
class AuthResult:
    """Outcome of resolving the current user: a user, or the reason there is none."""

    user: User | None = None
    error: NotAuthenticatedError | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None

    def unwrap(self) -> User:
        if self.user is None:
            raise self.error or NotAuthenticatedError()
        return self.user


def resolve_caller(provider: Callable[[], User | None]) -> AuthResult:
    """Ask ``provider`` for the current user without raising on absence."""
    try:
        user = provider()
    except NotAuthenticatedError as e:
        return AuthResult(error=e)
    if user is None:
        return AuthResult(error=NotAuthenticatedError())
    return AuthResult(user=user)


def require_user(caller: User | AuthResult | None) -> User:
    """Return the caller's identity or raise NotAuthenticatedError."""
    if isinstance(caller, AuthResult):
        return caller.unwrap()
    if caller is None or not caller.id:
        raise NotAuthenticatedError()
    return caller
