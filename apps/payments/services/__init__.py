"""Services for payments business logic."""

from .exceptions import (
    PaymentsServiceError,
    PaymentValidationError,
    PaymentNotFoundError,
    StorageFailure,
    AttachmentFailure,
)
from .store import PaymentStore
from .attachments import AttachmentManager
from .payment_management import (
    PaymentService,
    clean_payment_fields,
)

__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'PaymentValidationError',
    'PaymentNotFoundError',
    'StorageFailure',
    'AttachmentFailure',
    # Services
    'PaymentStore',
    'AttachmentManager',
    'PaymentService',
    'clean_payment_fields',
]
