"""
Domain exceptions for payments services.

Exception Hierarchy:
    PaymentsServiceError (base)
    ├── PaymentValidationError
    ├── PaymentNotFoundError
    ├── StorageFailure
    └── AttachmentFailure

Usage:
    from apps.payments.services.exceptions import PaymentNotFoundError

    try:
        payment = service.get(owner_id, payment_id)
    except PaymentNotFoundError as e:
        return Response({'error': str(e)}, status=404)
"""


class PaymentsServiceError(Exception):
    """Base exception for payments services."""
    pass


class PaymentValidationError(PaymentsServiceError):
    """
    Raised when payment input is malformed or out of range.

    Carries a field -> message mapping so views can report every problem
    at once.

    Example:
        raise PaymentValidationError({'weight_kg': 'Must not be negative'})
    """

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = {'non_field_errors': errors}
        self.errors = dict(errors)
        super().__init__('; '.join(f'{field}: {msg}' for field, msg in self.errors.items()))


class PaymentNotFoundError(PaymentsServiceError):
    """
    Raised when a payment does not exist or belongs to another user.

    Both cases use the same message so a caller cannot discover other
    users' records.
    """
    pass


class StorageFailure(PaymentsServiceError):
    """Raised when the record store fails (database error)."""
    pass


class AttachmentFailure(PaymentsServiceError):
    """
    Raised when a receipt file cannot be written.

    Cleanup of old files never raises this; it is only logged.
    """
    pass
