from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when login fails or the session is missing, invalid or expired.

    The message must stay generic: it never tells whether the email, the
    password, the investor type or the account status was the problem.
    """

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when an investor tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConfigurationError(Exception):
    """Raised when no configuration source could be resolved."""


class UpstreamError(Exception):
    """Raised when the backing identity/document store is unreachable or failing."""

    def __init__(self, message: str = "Upstream store unavailable") -> None:
        super().__init__(message)
