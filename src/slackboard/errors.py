from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class MissingTokenError(AuthenticationError):
    """Raised when a request carries no session token."""

    def __init__(self, message: str = "Unauthorized. No token provided.") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is malformed, forged or expired."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when a resource with the same unique key already exists."""


class FederationError(UserError):
    """Raised when the external identity provider rejects a code or token."""

    def __init__(self, message: str = "Google authentication failed") -> None:
        super().__init__(message)


class UpstreamError(UserError):
    """Raised when a Slack Web API call fails.

    The Slack error code (e.g. ``channel_not_found``) is kept on ``code``
    and used as the message when no explicit message is given.
    """

    def __init__(self, code: str | None = None, message: str | None = None) -> None:
        self.code = code or "unknown_error"
        super().__init__(message or self.code)
