class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when an operation is rejected by the session or roster rules."""


class PersistenceError(DomainError):
    """Raised when the record store cannot be read or written."""
