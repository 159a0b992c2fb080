# core/exceptions.py

"""
Error taxonomy for the lending API.

Every error a request can legitimately hit derives from LendingError and
carries the HTTP status it maps to. The api_view decorator in core.decorators
turns these into structured JSON responses; anything else is an internal
error.
"""


class LendingError(Exception):
    """Base exception for all recoverable request errors."""

    status_code = 400
    default_message = 'Request could not be processed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationFailed(LendingError):
    """Malformed or missing fields, reported per field."""

    default_message = 'Validation failed'

    def __init__(self, errors=None, message=None):
        self.errors = errors or {}
        super().__init__(message)

    def to_dict(self):
        payload = super().to_dict()
        if self.errors:
            payload['errors'] = self.errors
        return payload


class ConflictError(LendingError):
    """Raised when a unique business key (loan code) is already taken."""

    status_code = 409
    default_message = 'Resource already exists'


class DomainRuleError(LendingError):
    """Raised when an operation would break a business invariant."""

    default_message = 'Operation violates a business rule'


class PaymentExceedsBalanceError(DomainRuleError):
    """Raised when a payment is larger than the loan's running balance."""

    def __init__(self, amount, remaining_balance):
        self.amount = amount
        self.remaining_balance = remaining_balance
        super().__init__(
            f"Payment amount ({amount:,.2f}) exceeds the running balance "
            f"({remaining_balance:,.2f})"
        )

    def to_dict(self):
        payload = super().to_dict()
        payload['amount'] = str(self.amount)
        payload['remaining_balance'] = str(self.remaining_balance)
        return payload


class AuthenticationRequired(LendingError):
    status_code = 401
    default_message = 'Authentication required'


class AuthorizationError(LendingError):
    """Role lacks permission, or the record belongs to another collector."""

    status_code = 403
    default_message = 'Insufficient permissions'


class NotFoundError(LendingError):
    status_code = 404
    default_message = 'Not found'
