"""Data model for persisted lock state and lock status queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Resource:
    """A content item as seen by the lock manager.

    ``id`` is the item's stable path-like identifier (e.g. ``blog/hello``),
    ``directory`` is where its content files (and the shared lock file) live.
    """

    id: str
    directory: Path

    @property
    def lock_id(self) -> str:
        return "/" + self.id.lstrip("/")


@dataclass
class LockEntry:
    """The single active claim on a resource."""

    user: str
    time: int

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user, "time": self.time}

    @classmethod
    def from_dict(cls, data: Any) -> LockEntry | None:
        if not isinstance(data, dict):
            return None
        user = data.get("user")
        # Unquoted numeric ids load as int from YAML
        if user is None or isinstance(user, (dict, list)):
            return None
        user = str(user)
        if not user:
            return None
        try:
            return cls(user=user, time=int(data["time"]))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass
class ResourceLockState:
    """Lock and pending unlock notices of one resource.

    ``unlock`` collects ids of users whose lock was broken and who have not
    acknowledged it yet. Order carries no meaning; duplicates are dropped.
    """

    lock: LockEntry | None = None
    unlock: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.lock is None and not self.unlock

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.lock is not None:
            data["lock"] = self.lock.to_dict()
        if self.unlock:
            data["unlock"] = list(self.unlock)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ResourceLockState | None:
        if not isinstance(data, dict):
            return None
        unlock: list[str] = []
        raw_unlock = data.get("unlock")
        if isinstance(raw_unlock, list):
            for user in raw_unlock:
                if user is None or isinstance(user, (dict, list)):
                    continue
                user = str(user)
                if user and user not in unlock:
                    unlock.append(user)
        return cls(lock=LockEntry.from_dict(data.get("lock")), unlock=unlock)


@dataclass(frozen=True)
class Unlocked:
    """The resource is free for the caller (or already the caller's)."""

    locked: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"locked": False}


@dataclass(frozen=True)
class Locked:
    """The resource is held by another, still existing, user."""

    user: str
    email: str | None
    since: int
    breakable: bool
    locked: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "locked": True,
            "user": self.user,
            "email": self.email,
            "time": self.since,
            "canUnlock": self.breakable,
        }


LockStatus = Unlocked | Locked
