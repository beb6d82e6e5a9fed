class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a required student, user, or record does not exist."""


class InactiveError(DomainError):
    """Raised when a scanned code belongs to a deactivated student."""


class DuplicateScanError(DomainError):
    """Raised when a scan arrives for a record that is already checked out."""


class ConflictError(DomainError):
    """Raised when a concurrent write on the same (student, date) is detected."""


class AuthenticationError(DomainError):
    """Raised when the caller cannot be authenticated."""


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""


class AccountDisabledError(AuthenticationError):
    """Raised when the account has been deactivated."""


class InvalidTokenError(AuthenticationError):
    """Raised for any session token that fails verification."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
