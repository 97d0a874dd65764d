"""Domain errors. Each carries the HTTP status it maps to at the request boundary."""


class BetRoyalError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class Unauthenticated(BetRoyalError):
    status_code = 401
    message = 'Not authenticated'


class Forbidden(BetRoyalError):
    status_code = 403
    message = 'Forbidden'


class NotFound(BetRoyalError):
    status_code = 404
    message = 'Not found'


class ValidationFailure(BetRoyalError):
    """Request data that parsed but breaks a business rule."""
    status_code = 400
    message = 'Invalid request data'

    def __init__(self, message: str | None = None, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidAmount(ValidationFailure):
    message = 'Invalid amount'


class InsufficientBalance(BetRoyalError):
    """Raised when a debit would take the balance below zero."""
    status_code = 400
    message = 'Insufficient balance'


class DuplicateIdentifier(BetRoyalError):
    status_code = 400
    message = 'Username already exists'


class InvalidTransition(BetRoyalError):
    """Raised for a status change the transaction lifecycle does not allow."""
    status_code = 400
    message = 'Invalid transaction status change'
