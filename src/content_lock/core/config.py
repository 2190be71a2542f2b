"""Configuration dataclasses for content-lock.

These dataclasses centralize all configuration options for type safety
and easy testing. They can be created from an options mapping, from
environment variables, from command-line arguments, or used directly in code.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from content_lock.core.constants import (
    DEFAULT_LOCK_DURATION,
    DEFAULT_LOCK_FILE_FORMAT,
    DEFAULT_LOCK_FILE_NAME,
    ENV_VAR_MAPPING,
    LOCK_FILE_FORMATS,
    OPTION_KEY_MAPPING,
)
from content_lock.core.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class BreakPolicy(Enum):
    """Who may break an existing lock."""

    PERMISSIVE = "permissive"  # Anyone, including the owner
    REJECT_OWNER = "reject_owner"  # Owners must use release instead


@dataclass(frozen=True)
class LockConfig:
    """Configuration for content locks.

    Attributes:
        duration_seconds: Seconds after which a lock may be broken (default: 120)
        file_name: Lock file name inside each content directory (default: ".lock")
        file_format: Serialization of the lock file, "yaml" or "json" (default: "yaml")
        break_policy: Who may break a lock (default: permissive)
        detect_conflicts: Reject writes when the lock file changed since it was read (default: True)
    """

    duration_seconds: int = DEFAULT_LOCK_DURATION
    file_name: str = DEFAULT_LOCK_FILE_NAME
    file_format: str = DEFAULT_LOCK_FILE_FORMAT
    break_policy: BreakPolicy = BreakPolicy.PERMISSIVE
    detect_conflicts: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.duration_seconds, bool) or not isinstance(self.duration_seconds, int):
            raise ConfigurationError("Lock duration must be an integer", field="duration_seconds")
        if self.duration_seconds < 0:
            raise ConfigurationError(
                "Lock duration cannot be negative",
                field="duration_seconds",
                details=str(self.duration_seconds),
            )
        if not self.file_name or "/" in self.file_name:
            raise ConfigurationError("Lock file name must be a bare file name", field="file_name")
        if self.file_format not in LOCK_FILE_FORMATS:
            raise ConfigurationError(
                f"Unknown lock file format '{self.file_format}'",
                field="file_format",
                details=f"expected one of {', '.join(LOCK_FILE_FORMATS)}",
            )
        if not isinstance(self.break_policy, BreakPolicy):
            raise ConfigurationError("Break policy must be a BreakPolicy", field="break_policy")

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_seconds": self.duration_seconds,
            "file_name": self.file_name,
            "file_format": self.file_format,
            "break_policy": self.break_policy.value,
            "detect_conflicts": self.detect_conflicts,
        }

    @classmethod
    def from_options(cls, options: Mapping[str, Any], base: LockConfig | None = None) -> LockConfig:
        """Create configuration from a host application's option mapping.

        Only keys listed in OPTION_KEY_MAPPING (e.g. ``lock.duration``) are read;
        anything missing keeps the value from ``base``.
        """
        values = {
            field_name: options[key] for key, field_name in OPTION_KEY_MAPPING.items() if key in options
        }
        return _apply(base or cls(), values)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        load_dotenv_file: bool = True,
        base: LockConfig | None = None,
    ) -> LockConfig:
        """Create configuration from CONTENT_LOCK_* environment variables.

        Priority: 1) environment variable, 2) value in ``base``, 3) default.
        """
        if environ is None:
            if load_dotenv_file:
                _bootstrap_dotenv(logging.getLogger(__name__))
            environ = os.environ
        values = {field_name: environ[name] for name, field_name in ENV_VAR_MAPPING.items() if environ.get(name)}
        return _apply(base or cls(), values)

    @classmethod
    def from_args(cls, args: argparse.Namespace, base: LockConfig | None = None) -> LockConfig:
        """Create configuration from parsed command-line arguments."""
        values = {}
        for field_name, arg_name in (
            ("duration_seconds", "duration"),
            ("file_name", "lock_file"),
            ("file_format", "format"),
            ("break_policy", "break_policy"),
            ("detect_conflicts", "detect_conflicts"),
        ):
            value = getattr(args, arg_name, None)
            if value is not None:
                values[field_name] = value
        return _apply(base or cls(), values)


def _bootstrap_dotenv(logger: logging.Logger) -> None:
    """Load .env variables if python-dotenv is available."""
    try:
        from dotenv import load_dotenv
    except ImportError:
        logger.debug("python-dotenv not installed (.env files will not be auto-loaded)")
        return

    if load_dotenv():
        logger.debug(".env file found and loaded")
    else:
        logger.debug(".env file not found (python-dotenv available but no .env file)")


def _coerce_int(field_name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError("Expected an integer", field=field_name, details=repr(value))
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("Expected an integer", field=field_name, details=repr(value)) from e


def _coerce_bool(field_name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError("Expected a boolean", field=field_name, details=repr(value))


def _coerce_policy(field_name: str, value: Any) -> BreakPolicy:
    if isinstance(value, BreakPolicy):
        return value
    normalized = str(value).strip().lower().replace("-", "_")
    try:
        return BreakPolicy(normalized)
    except ValueError as e:
        choices = ", ".join(policy.value for policy in BreakPolicy)
        raise ConfigurationError(
            f"Unknown break policy '{value}'", field=field_name, details=f"expected one of {choices}"
        ) from e


_COERCERS = {
    "duration_seconds": _coerce_int,
    "file_name": lambda _field, value: str(value),
    "file_format": lambda _field, value: str(value).strip().lower(),
    "break_policy": _coerce_policy,
    "detect_conflicts": _coerce_bool,
}


def _apply(base: LockConfig, values: Mapping[str, Any]) -> LockConfig:
    known = {f.name for f in fields(LockConfig)}
    coerced = {name: _COERCERS[name](name, value) for name, value in values.items() if name in known}
    return replace(base, **coerced)


DEFAULT_LOCK_CONFIG = LockConfig()
