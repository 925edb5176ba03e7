class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP status the API boundary answers with.
    """

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or the bearer token are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the referenced resource does not exist (or is not visible to the caller)."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when the current state of a resource disallows the operation."""

    status_code = 409


class ConfigurationError(DomainError):
    """Raised when the system is missing required setup, e.g. no active office."""

    status_code = 400


class InternalError(DomainError):
    """Unexpected persistence/runtime failure. Details are logged, never returned."""

    status_code = 500
