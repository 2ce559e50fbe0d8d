class DomainError(Exception):
    """Base class for errors the HTTP layer maps to a 4xx response."""


class ValidationError(DomainError):
    """Raised when request data is missing or malformed."""


class AuthenticationError(DomainError):
    """Raised when an email/password pair does not match an active operator."""


class AuthorizationError(DomainError):
    """Raised when an operator lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record does not exist or belongs to another operator."""


class ConflictError(DomainError):
    """Raised when a unique value (email, mobile number, ...) is already taken."""
