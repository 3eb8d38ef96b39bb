class ApplicationError(Exception):
    """Base application-layer error, independent from transport concerns."""


class NotFoundError(ApplicationError):
    """Raised when an expected entity does not exist."""


class ConflictError(ApplicationError):
    """Raised when a uniqueness or state conflict occurs."""


class AuthorizationError(ApplicationError):
    """Raised when the caller's role or ownership does not allow the operation."""


class ValidationError(ApplicationError):
    """Raised when application-level validation fails."""


class NoOutstandingInvoiceError(ConflictError):
    """Raised when a payment is attempted but nothing is owed."""
