class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP status the API layer answers with.
    """

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class DuplicateUser(DomainError):
    """Raised when registering a username that is already taken."""


class InvalidCredentials(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class Unauthorized(DomainError):
    """Raised when a request carries no usable identity."""

    status_code = 401


class InvalidToken(Unauthorized):
    """Raised when a bearer token is malformed, forged or stale."""


class Forbidden(DomainError):
    """Raised when the caller's role does not allow the action."""

    status_code = 403


class NotFound(DomainError):
    """Raised when a resource is absent or not owned by the caller."""

    status_code = 404


class InvalidOrExpiredCode(DomainError):
    """Raised when a session code does not resolve to an active session."""


class AlreadyMarked(DomainError):
    """Raised when a student already has a record for the session."""
