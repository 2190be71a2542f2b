"""Content locking subsystem.

A ``LockManager`` guards one resource; all resources of a content directory
share one lock file handled by ``LockFileStore``.
"""

from content_lock.locks.manager import LockManager
from content_lock.locks.models import LockEntry, Locked, LockStatus, Resource, ResourceLockState, Unlocked
from content_lock.locks.store import LockFileStore, prune_entries, version_token
from content_lock.locks.users import (
    AuthResult,
    InMemoryUserDirectory,
    OpenUserDirectory,
    User,
    UserDirectory,
    load_user_directory,
    require_user,
    resolve_caller,
)

__all__ = [
    "AuthResult",
    "InMemoryUserDirectory",
    "LockEntry",
    "LockFileStore",
    "LockManager",
    "LockStatus",
    "Locked",
    "OpenUserDirectory",
    "Resource",
    "ResourceLockState",
    "Unlocked",
    "User",
    "UserDirectory",
    "load_user_directory",
    "prune_entries",
    "require_user",
    "resolve_caller",
    "version_token",
]
