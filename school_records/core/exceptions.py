class ServiceError(Exception):
    """Base exception mapped to a stable outcome code and HTTP status."""

    status_code = 500
    code = "service_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationFailed(ServiceError):
    """Raised when a token is missing, malformed, tampered with or expired."""

    status_code = 401
    code = "authentication_failed"


class AuthorizationDenied(ServiceError):
    """Raised when a valid identity lacks the role or ownership for an action."""

    status_code = 403
    code = "authorization_denied"


class ValidationFailed(ServiceError):
    """Raised when input fields are malformed or out of range."""

    status_code = 400
    code = "validation_failed"


class NotFound(ServiceError):
    """Raised when an operation targets a record that does not exist."""

    status_code = 404
    code = "not_found"


class StorageIOError(ServiceError):
    """Raised when a collection cannot be read or written."""

    status_code = 500
    code = "storage_io_error"


class InvalidToken(Exception):
    """Raised by the token codec; callers turn it into AuthenticationFailed."""
