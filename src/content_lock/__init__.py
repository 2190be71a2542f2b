"""
content-lock - Per-resource advisory edit locks for content directories

Lets one user at a time hold the editing lock on a content item, lets other
users break stale locks, and keeps a notice for the previous owner until
they acknowledge it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__all__ = ["__version__", "LockManager", "Resource", "User"]

if TYPE_CHECKING:
    from content_lock.core.version import __version__
    from content_lock.locks import LockManager, Resource, User


def __getattr__(name: str) -> Any:
    if name == "__version__":
        from content_lock.core import version

        return version.__version__
    if name in __all__:
        from content_lock import locks

        return getattr(locks, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
