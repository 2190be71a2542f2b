"""Custom exceptions for content-lock.

All exception classes are designed to provide clear, actionable error messages
with context about what went wrong and how to fix it.
"""


class ContentLockError(Exception):
    """Base exception for all content-lock errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ContentLockError):
    """Exception raised for configuration-related errors.

    Examples:
        - Non-numeric or negative lock duration
        - Unknown lock file format
        - Unknown break policy
    """

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class NotAuthenticatedError(ContentLockError):
    """Raised when an operation needs a caller identity and none was given."""

    def __init__(self, message: str = "No user authenticated.", details: str | None = None):
        super().__init__(message, details)


class PermissionDeniedError(ContentLockError):
    """Raised when a lock transition is not allowed for the caller.

    Examples:
        - Acquiring a lock already held by a different user
        - Releasing a lock created by a different user
        - Breaking one's own lock under the reject-owner break policy

    Attributes:
        resource_id: Lock id of the resource the transition targeted
    """

    def __init__(self, message: str, resource_id: str | None = None, details: str | None = None):
        self.resource_id = resource_id
        super().__init__(message, details)


class StoreConflictError(ContentLockError):
    """Raised when the lock file changed on disk after it was read.

    The in-memory snapshot is stale; reload the manager and retry.

    Attributes:
        path: Lock file whose version token advanced
    """

    def __init__(self, path: str, details: str | None = None):
        self.path = path
        super().__init__(f"Lock file '{path}' was modified by another writer", details)
