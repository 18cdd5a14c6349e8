"""Error taxonomy shared by the services and the HTTP layer."""


class ForumError(Exception):
    """Base exception for forum errors.

    Each subclass carries the HTTP status code it maps to at the API boundary.
    """

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ForumError):
    """Raised when input is missing or malformed."""

    status_code = 422
    default_message = "Invalid input"


class AuthenticationError(ForumError):
    """Raised when there is no valid session or a credential check fails."""

    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(ForumError):
    """Raised when the session is valid but the action is denied."""

    status_code = 403
    default_message = "Not allowed"


class NotFoundError(ForumError):
    """Raised when a resource or user is not found."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(ForumError):
    """Raised on a uniqueness violation (duplicate title, duplicate flag)."""

    status_code = 409
    default_message = "Conflict"


class StorageError(ForumError):
    """Raised when the persistence layer fails. Never retried by the core."""

    status_code = 503
    default_message = "Database unavailable"
