"""
Errors raised by the progress store and the access gate.

Routers translate them into HTTP responses; services never build responses.
"""


class ReviewApiError(Exception):
    """Base class for every error the services raise on purpose."""

    default_message = "Review API error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ReviewApiError):
    default_message = "Invalid data. Username and reviews are required."


class ProgressNotFound(ReviewApiError):
    default_message = "No reviewed data found for this username."

    def __init__(self, username: str, message: str = None):
        self.username = username
        super().__init__(message)


class AccessDenied(ReviewApiError):
    default_message = "Access denied"


class InvalidCredentials(AccessDenied):
    # Unknown username and wrong password share this message
    default_message = "Invalid username or password"


class LanguageNotAssigned(AccessDenied):
    default_message = "You can only select your assigned language!"


class StoreError(ReviewApiError):
    default_message = "An internal server error occurred."


class StoreUnavailable(StoreError):
    default_message = "The database is unreachable or timed out."
