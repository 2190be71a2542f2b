"""Constants and default values for content-lock.

This module centralizes all magic numbers and environment variable names
used throughout the application.
"""

# ==================== LOCK DEFAULTS ====================

DEFAULT_LOCK_DURATION: int = 60 * 2  # Seconds before a lock may be broken
DEFAULT_LOCK_FILE_NAME: str = ".lock"  # One lock file per content directory
DEFAULT_LOCK_FILE_FORMAT: str = "yaml"
LOCK_FILE_FORMATS: tuple[str, ...] = ("yaml", "json")

# ==================== LOGGING DEFAULTS ====================

LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB max per log file
LOG_FILE_BACKUP_COUNT: int = 5  # Number of backup log files to keep
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ==================== ENVIRONMENT ====================

# Environment variable -> LockConfig field
ENV_VAR_MAPPING: dict[str, str] = {
    "CONTENT_LOCK_DURATION": "duration_seconds",
    "CONTENT_LOCK_FILE": "file_name",
    "CONTENT_LOCK_FORMAT": "file_format",
    "CONTENT_LOCK_BREAK_POLICY": "break_policy",
    "CONTENT_LOCK_DETECT_CONFLICTS": "detect_conflicts",
}

# Option key (as used by the host application's config) -> LockConfig field
OPTION_KEY_MAPPING: dict[str, str] = {
    "lock.duration": "duration_seconds",
    "lock.file": "file_name",
    "lock.format": "file_format",
    "lock.breakPolicy": "break_policy",
    "lock.detectConflicts": "detect_conflicts",
}
