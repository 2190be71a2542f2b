"""Content lock manager: one editor per resource, with breakable stale locks."""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable
from pathlib import Path

from content_lock.core.config import DEFAULT_LOCK_CONFIG, BreakPolicy, LockConfig
from content_lock.core.exceptions import PermissionDeniedError
from content_lock.core.logging import with_log_context
from content_lock.locks.models import LockEntry, Locked, LockStatus, Resource, ResourceLockState, Unlocked
from content_lock.locks.store import LockFileStore
from content_lock.locks.users import AuthResult, User, UserDirectory, require_user

Caller = User | AuthResult | None


class LockManager:
    """Lock and unlock bookkeeping for a single resource.

    The lock file of the resource's directory is read once at construction.
    Every mutation is applied to that snapshot and the whole file is written
    back immediately. Mutations return False when the write failed; the
    snapshot keeps the change, so call ``reload`` before retrying.
    """

    def __init__(
        self,
        resource: Resource,
        *,
        users: UserDirectory,
        config: LockConfig | None = None,
        store: LockFileStore | None = None,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ):
        self.resource = resource
        self.users = users
        self.config = config or DEFAULT_LOCK_CONFIG
        self.clock = clock
        base_logger = logger or logging.getLogger(__name__)
        self.logger = with_log_context(base_logger, resource=resource.lock_id)
        self.store = store or LockFileStore(
            Path(resource.directory) / self.config.file_name,
            file_format=self.config.file_format,
            detect_conflicts=self.config.detect_conflicts,
            logger=base_logger,
        )
        self.data = self.store.read()

    @property
    def lock_id(self) -> str:
        return self.resource.lock_id

    def reload(self) -> None:
        """Drop the in-memory snapshot and read the lock file again."""
        self.data = self.store.read()

    def state(self) -> ResourceLockState:
        """Return a copy of this resource's lock state."""
        return copy.deepcopy(self.data.get(self.lock_id, ResourceLockState()))

    def status(self, caller: Caller) -> LockStatus:
        """Return whether the resource is locked from the caller's point of view.

        The caller's own lock, and a lock whose owner no longer exists,
        both count as unlocked.
        """
        lock = self._lock()
        if lock is None:
            return Unlocked()

        user = require_user(caller)
        if lock.user == user.id:
            return Unlocked()

        owner = self.users.find(lock.user)
        if owner is None:
            return Unlocked()

        return Locked(
            user=owner.id,
            email=owner.email,
            since=lock.time,
            breakable=lock.time + self.config.duration_seconds <= self._now(),
        )

    def get(self, caller: Caller) -> dict:
        """Return the status as ``{"locked": ...}`` mapping."""
        return self.status(caller).to_dict()

    def is_locked_by_other(self, caller: Caller) -> bool:
        return isinstance(self.status(caller), Locked)

    def was_broken_for(self, caller: Caller) -> bool:
        """Return whether the caller's lock was broken and not yet acknowledged."""
        user = require_user(caller)
        entry = self.data.get(self.lock_id)
        return entry is not None and user.id in entry.unlock

    def acquire(self, caller: Caller) -> bool:
        """Lock the resource for the caller, or refresh the caller's lock."""
        user = require_user(caller)
        lock = self._lock()
        if lock is not None and lock.user != user.id:
            raise PermissionDeniedError(f"{self.lock_id} is already locked", resource_id=self.lock_id)

        entry = self.data.setdefault(self.lock_id, ResourceLockState())
        entry.lock = LockEntry(user=user.id, time=self._now())

        written = self.store.write(self.data)
        if written:
            self.logger.info("Lock acquired by %s", user.id)
        return written

    def release(self, caller: Caller) -> bool:
        """Remove the caller's own lock."""
        lock = self._lock()
        if lock is None:
            return True

        user = require_user(caller)
        if lock.user != user.id:
            raise PermissionDeniedError(
                "The content lock can only be removed by the user who created it. Use unlock instead.",
                resource_id=self.lock_id,
            )

        self.data[self.lock_id].lock = None
        written = self.store.write(self.data)
        if written:
            self.logger.info("Lock released by %s", user.id)
        return written

    def break_lock(self, caller: Caller = None) -> bool:
        """Remove the current lock and leave an unlock notice for its owner."""
        lock = self._lock()
        if lock is None:
            return True

        if self.config.break_policy is BreakPolicy.REJECT_OWNER:
            user = require_user(caller)
            if user.id == lock.user:
                raise PermissionDeniedError(
                    "Your own content lock cannot be broken. Use remove instead.",
                    resource_id=self.lock_id,
                )

        entry = self.data[self.lock_id]
        if lock.user not in entry.unlock:
            entry.unlock.append(lock.user)
        entry.lock = None

        written = self.store.write(self.data)
        if written:
            self.logger.info("Lock of %s broken", lock.user)
        return written

    def acknowledge(self, caller: Caller) -> bool:
        """Clear the caller's notice that their lock was broken."""
        entry = self.data.get(self.lock_id)
        if entry is None or not entry.unlock:
            return True

        user = require_user(caller)
        entry.unlock = [user_id for user_id in entry.unlock if user_id != user.id]

        written = self.store.write(self.data)
        if written:
            self.logger.info("Unlock acknowledged by %s", user.id)
        return written

    def _lock(self) -> LockEntry | None:
        entry = self.data.get(self.lock_id)
        return entry.lock if entry is not None else None

    def _now(self) -> int:
        return int(self.clock())
