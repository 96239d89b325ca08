"""
Error types raised by the API.

Every error carries a human readable ``message`` and the HTTP status it maps
to. The application factory registers a single handler that renders them as
``{"message": ...}``.
"""


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ApiError):
    """Malformed or missing input fields."""

    status_code = 400
    default_message = "Invalid request"


class Conflict(ApiError):
    status_code = 400
    default_message = "Conflict"


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class DuplicateUsername(Conflict):
    default_message = "Username already exists"


class InvalidCredentials(Unauthenticated):
    # Same message for unknown user and wrong password.
    default_message = "Invalid username or password"
