"""Lock file persistence.

Design principles:
- A lock file holds every resource of one content directory and is always
  rewritten as a whole; entries with nothing to say are pruned first and an
  empty store deletes the file.
- Reading never fails: anything unreadable is an empty store.
- Writing reports failure as ``False`` instead of raising, except for
  version conflicts, which callers must handle by reloading.
"""

from __future__ import annotations

import contextlib
import errno
import hashlib
import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from content_lock.core.constants import DEFAULT_LOCK_FILE_FORMAT, LOCK_FILE_FORMATS
from content_lock.core.exceptions import ConfigurationError, StoreConflictError
from content_lock.locks.models import ResourceLockState

try:
    import fcntl
except ImportError:  # pragma: no cover - exercised on non-POSIX only
    fcntl = None

_FLOCK_UNSUPPORTED_ERRNOS = {
    err_no
    for err_no in (
        getattr(errno, "ENOTSUP", None),
        getattr(errno, "EOPNOTSUPP", None),
        getattr(errno, "ENOSYS", None),
    )
    if err_no is not None
}

LockEntries = dict[str, ResourceLockState]


def version_token(raw: bytes) -> str:
    """Return the version token of raw lock file content."""
    return hashlib.sha256(raw).hexdigest()


def prune_entries(entries: LockEntries) -> LockEntries:
    """Drop resources without a lock and without pending unlock notices, in place."""
    for resource_id in [rid for rid, state in entries.items() if state.is_empty]:
        del entries[resource_id]
    return entries


def entries_to_dict(entries: LockEntries) -> dict[str, Any]:
    return {resource_id: state.to_dict() for resource_id, state in entries.items() if not state.is_empty}


def entries_from_dict(data: Any) -> LockEntries:
    if not isinstance(data, dict):
        return {}
    entries: LockEntries = {}
    for resource_id, value in data.items():
        state = ResourceLockState.from_dict(value)
        if state is not None:
            entries[str(resource_id)] = state
    return entries


class LockFileStore:
    """Reads and writes one lock file and remembers the version it last saw.

    ``token`` is the version token of the file content observed by the last
    ``read`` or produced by the last successful ``write`` (``None`` while the
    file does not exist). With ``detect_conflicts`` a write is refused when
    the file on disk no longer matches that token.
    """

    def __init__(
        self,
        path: Path,
        *,
        file_format: str = DEFAULT_LOCK_FILE_FORMAT,
        detect_conflicts: bool = True,
        logger: logging.Logger | None = None,
    ):
        if file_format not in LOCK_FILE_FORMATS:
            raise ConfigurationError(f"Unknown lock file format '{file_format}'", field="file_format")
        self.path = Path(path)
        self.file_format = file_format
        self.detect_conflicts = detect_conflicts
        self.logger = logger or logging.getLogger(__name__)
        self.token: str | None = None

    def read(self) -> LockEntries:
        """Load the lock file; a missing, unreadable or corrupt file is an empty store."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            self.token = None
            return {}
        except OSError as e:
            self.logger.debug("Cannot read lock file %s; starting empty (%s)", self.path, e)
            self.token = None
            return {}

        self.token = version_token(raw)
        try:
            data = self._decode(raw)
        except (ValueError, yaml.YAMLError) as e:
            self.logger.debug("Corrupt lock file %s; starting empty (%s)", self.path, e)
            return {}

        if not isinstance(data, dict):
            self.logger.debug("Lock file %s does not contain a mapping; starting empty", self.path)
            return {}
        return entries_from_dict(data)

    def write(self, entries: LockEntries) -> bool:
        """Prune ``entries`` and persist them, deleting the file when nothing is left.

        Returns False when the file could not be written or removed.
        Raises StoreConflictError when another writer changed the file first.
        """
        prune_entries(entries)
        try:
            with self._exclusive():
                if self.detect_conflicts:
                    current = self._current_token()
                    if current != self.token:
                        self.logger.warning("Lock file %s changed since it was read; refusing to overwrite", self.path)
                        raise StoreConflictError(str(self.path))

                if not entries:
                    self._remove()
                    self.token = None
                    return True

                payload = self._encode(entries_to_dict(entries))
                self._atomic_write(payload)
                self.token = version_token(payload)
                return True
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            self.logger.error("Failed to write lock file %s: %s", self.path, e)
            return False

    def _decode(self, raw: bytes) -> Any:
        if self.file_format == "json":
            return json.loads(raw.decode("utf-8"))
        return yaml.safe_load(raw.decode("utf-8"))

    def _encode(self, data: dict[str, Any]) -> bytes:
        if self.file_format == "json":
            text = json.dumps(data, indent=2, sort_keys=True) + "\n"
        else:
            text = yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)
        return text.encode("utf-8")

    def _current_token(self) -> str | None:
        try:
            return version_token(self.path.read_bytes())
        except OSError:
            return None

    def _atomic_write(self, payload: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f"{self.path.name}.tmp")
        try:
            tmp.write_bytes(payload)
            tmp.replace(self.path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    def _remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    @contextlib.contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold an advisory flock on the lock file's directory.

        Falls through without a lock where flock is missing or unsupported,
        or when the directory does not exist yet.
        """
        if fcntl is None:
            yield
            return

        try:
            fd = os.open(str(self.path.parent), os.O_RDONLY)
        except OSError as e:
            self.logger.debug("Cannot open %s for locking; writing unguarded (%s)", self.path.parent, e)
            yield
            return

        locked = False
        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
                locked = True
            except OSError as e:
                if e.errno not in _FLOCK_UNSUPPORTED_ERRNOS:
                    raise
                self.logger.debug("flock unsupported for %s; writing unguarded", self.path.parent)
            yield
        finally:
            if locked:
                with contextlib.suppress(OSError):
                    fcntl.flock(fd, fcntl.LOCK_UN)
            with contextlib.suppress(OSError):
                os.close(fd)
