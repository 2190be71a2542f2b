"""Core module - Foundation components with no internal dependencies.

This module provides the basic building blocks used throughout the application:
- Version information
- Custom exceptions
- Configuration dataclasses
- Constants and defaults
- Logging setup
"""

from content_lock.core.version import __version__

from content_lock.core.exceptions import (
    ContentLockError,
    ConfigurationError,
    NotAuthenticatedError,
    PermissionDeniedError,
    StoreConflictError,
)

from content_lock.core.config import (
    BreakPolicy,
    LockConfig,
    DEFAULT_LOCK_CONFIG,
)

from content_lock.core.constants import (
    DEFAULT_LOCK_DURATION,
    DEFAULT_LOCK_FILE_NAME,
    DEFAULT_LOCK_FILE_FORMAT,
    LOCK_FILE_FORMATS,
    ENV_VAR_MAPPING,
    OPTION_KEY_MAPPING,
)

from content_lock.core.logging import (
    JSONFormatter,
    setup_logging,
    with_log_context,
)

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'ContentLockError',
    'ConfigurationError',
    'NotAuthenticatedError',
    'PermissionDeniedError',
    'StoreConflictError',
    # Config
    'BreakPolicy',
    'LockConfig',
    'DEFAULT_LOCK_CONFIG',
    # Constants
    'DEFAULT_LOCK_DURATION',
    'DEFAULT_LOCK_FILE_NAME',
    'DEFAULT_LOCK_FILE_FORMAT',
    'LOCK_FILE_FORMATS',
    'ENV_VAR_MAPPING',
    'OPTION_KEY_MAPPING',
    # Logging
    'JSONFormatter',
    'setup_logging',
    'with_log_context',
]
