"""
Payment lifecycle service.

Validates and applies get/create/update/delete on a user's payments and
keeps the receipt attachment in step with the record:

    create  -> store upload, then insert row
    update  -> store new upload, update row, then remove the old file
    delete  -> delete row, then remove its file

Attachment cleanup never decides the outcome of an operation; the record
store does.
"""

import logging
from datetime import date as date_type, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union

from django.utils.dateparse import parse_date, parse_datetime

from ..models import Payment
from .attachments import AttachmentManager
from .exceptions import (
    AttachmentFailure,
    PaymentNotFoundError,
    PaymentValidationError,
    StorageFailure,
)
from .store import PaymentStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('date', 'coffee_type', 'weight_kg', 'total_price')
COFFEE_TYPE_MAX_LENGTH = 100

# Column limits: weight_kg is Decimal(10, 3), total_price a signed 64-bit integer
WEIGHT_MAX = Decimal('9999999.999')
WEIGHT_STEP = Decimal('0.001')
PRICE_MAX = 2 ** 63 - 1


def clean_date(value) -> date_type:
    """Parse a calendar date from a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_date(text)
            if parsed is None:
                parsed_dt = parse_datetime(text)
                parsed = parsed_dt.date() if parsed_dt else None
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise ValueError("Enter a valid date (YYYY-MM-DD)")


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError("A number is required")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("A number is required")
    if not number.is_finite():
        raise ValueError("A number is required")
    return number


def clean_weight(value) -> Decimal:
    """Non-negative weight in kilograms."""
    weight = _to_decimal(value)
    if weight < 0:
        raise ValueError("Weight must not be negative")
    if weight > WEIGHT_MAX:
        raise ValueError(f"Weight must be at most {WEIGHT_MAX} kg")
    if weight != weight.quantize(WEIGHT_STEP):
        raise ValueError("Weight must have at most 3 decimal places")
    return weight


def clean_price(value) -> int:
    """Non-negative whole amount in the smallest currency unit."""
    price = _to_decimal(value)
    if price != price.to_integral_value():
        raise ValueError("Price must be a whole number")
    if price < 0:
        raise ValueError("Price must not be negative")
    if price > PRICE_MAX:
        raise ValueError(f"Price must be at most {PRICE_MAX}")
    return int(price)


def clean_coffee_type(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Coffee type is required")
    value = value.strip()
    if len(value) > COFFEE_TYPE_MAX_LENGTH:
        raise ValueError(f"Coffee type must be at most {COFFEE_TYPE_MAX_LENGTH} characters")
    return value


CLEANERS = {
    'date': clean_date,
    'coffee_type': clean_coffee_type,
    'weight_kg': clean_weight,
    'total_price': clean_price,
}


def clean_payment_fields(data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Validate payment fields.

    Args:
        data: Raw field values keyed by field name. Unknown keys are ignored.
        partial: If True, only the supplied fields are validated.

    Returns:
        Dict of cleaned values.

    Raises:
        PaymentValidationError: With every failing field.
    """
    cleaned = {}
    errors = {}

    for field in EDITABLE_FIELDS:
        if field not in data:
            if not partial:
                errors[field] = "This field is required"
            continue
        try:
            cleaned[field] = CLEANERS[field](data[field])
        except ValueError as e:
            errors[field] = str(e)

    if errors:
        raise PaymentValidationError(errors)

    return cleaned


class PaymentService:
    """
    Owner-scoped payment operations.

    Args:
        store: Record store adapter. Defaults to an ORM-backed PaymentStore.
        attachments: Attachment manager. Defaults to one over default_storage.

    Example::

        service = PaymentService()
        payment = service.create(
            request.user.id,
            date='2025-03-01',
            coffee_type='Kopi Bubuk',
            weight_kg='1.5',
            total_price='199000',
            attachment=request.FILES.get('image'),
        )
    """

    def __init__(self, store=None, attachments=None):
        self.store = store if store is not None else PaymentStore()
        self.attachments = attachments if attachments is not None else AttachmentManager()

    def get(self, owner_id, payment_id=None) -> Union[Payment, List[Payment]]:
        """
        Return one owned payment, or all of them newest date first.

        Raises:
            PaymentNotFoundError: If ``payment_id`` is given and not owned.
        """
        if payment_id is None:
            return self.store.find_all(owner_id)
        return self._get_owned(owner_id, payment_id)

    def create(
        self,
        owner_id,
        *,
        attachment=None,
        attachment_name: str = '',
        **fields
    ) -> Payment:
        """
        Validate and persist a new payment.

        Args:
            owner_id: Caller identity.
            attachment: Optional receipt (bytes or uploaded file).
            attachment_name: Original client file name of the receipt.
            **fields: date, coffee_type, weight_kg, total_price.

        Raises:
            PaymentValidationError: Malformed or negative input; nothing is saved.
            AttachmentFailure: The receipt could not be written.
            StorageFailure: The record could not be saved.
        """
        cleaned = clean_payment_fields(fields)

        image = ''
        if attachment is not None:
            image = self.attachments.store(attachment, attachment_name)

        record = dict(cleaned, owner_id=owner_id, image=image)
        try:
            payment = self.store.create(record)
        except StorageFailure:
            self._discard(image)
            raise

        logger.info("Payment %s created by user %s", payment.pk, owner_id)
        return payment

    def update(
        self,
        owner_id,
        payment_id,
        *,
        attachment=None,
        attachment_name: str = '',
        **fields
    ) -> Payment:
        """
        Apply field changes and optionally replace the receipt.

        Only supplied fields are validated and written. The previous receipt
        is removed after the record update has succeeded; that removal can
        fail without affecting the result. If the new receipt cannot be
        written the previous one is kept and the field changes still apply.

        Raises:
            PaymentNotFoundError: If the payment is missing or not owned.
            PaymentValidationError: Malformed or negative input.
            StorageFailure: The record could not be saved.
        """
        previous_image = self._get_owned(owner_id, payment_id).image
        patch = clean_payment_fields(fields, partial=True)

        new_image = None
        if attachment is not None:
            try:
                new_image = self.attachments.store(attachment, attachment_name)
            except AttachmentFailure:
                # Keep the old receipt; the field changes still go through
                logger.warning(
                    "Receipt upload for payment %s failed, keeping previous image",
                    payment_id, exc_info=True
                )
            else:
                patch['image'] = new_image

        try:
            updated = self.store.update(owner_id, payment_id, patch)
        except StorageFailure:
            self._discard(new_image)
            raise

        if updated is None:
            # Deleted between the ownership check and the update
            self._discard(new_image)
            raise PaymentNotFoundError(f"Payment {payment_id} not found")

        if new_image and previous_image and previous_image != new_image:
            self._discard(previous_image)

        logger.info("Payment %s updated by user %s", payment_id, owner_id)
        return updated

    def delete(self, owner_id, payment_id) -> None:
        """
        Delete a payment and, best-effort, its receipt.

        Raises:
            PaymentNotFoundError: If the payment is missing or not owned.
            StorageFailure: The record could not be deleted.
        """
        existing = self._get_owned(owner_id, payment_id)

        if not self.store.delete(owner_id, payment_id):
            raise PaymentNotFoundError(f"Payment {payment_id} not found")

        self._discard(existing.image)
        logger.info("Payment %s deleted by user %s", payment_id, owner_id)

    def _get_owned(self, owner_id, payment_id) -> Payment:
        payment = self.store.find_one(owner_id, payment_id)
        if payment is None:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return payment

    def _discard(self, reference: Optional[str]) -> None:
        """Remove an attachment without letting any failure escape."""
        if not reference:
            return
        try:
            self.attachments.remove(reference)
        except Exception:
            # Log error but don't fail the record operation
            logger.warning("Attachment cleanup failed for %s", reference, exc_info=True)
