"""Record store adapter: owner-scoped Payment persistence over the ORM."""

from typing import Any, Dict, List, Optional

from django.db import DatabaseError, transaction

from ..models import Payment
from .exceptions import StorageFailure


class PaymentStore:
    """
    Owner-scoped CRUD access to Payment rows.

    Every lookup filters by ``owner_id``; a row owned by someone else is
    indistinguishable from a missing one. Database errors are re-raised as
    StorageFailure so callers never see driver exceptions.

    The store is constructed explicitly and handed to PaymentService (and
    the analytics views), which keeps tests free to swap in a fake.
    """

    def __init__(self, queryset=None):
        self._queryset = queryset if queryset is not None else Payment.objects.all()

    def _owned(self, owner_id):
        return self._queryset.filter(owner_id=owner_id)

    def find_one(self, owner_id, payment_id) -> Optional[Payment]:
        try:
            return self._owned(owner_id).filter(id=payment_id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as e:
            raise StorageFailure(f"Failed to load payment {payment_id}") from e

    def find_all(self, owner_id) -> List[Payment]:
        try:
            return list(
                self._owned(owner_id)
                .select_related('owner')
                .order_by('-date', '-created_at', '-id')
            )
        except DatabaseError as e:
            raise StorageFailure("Failed to load payments") from e

    def create(self, record: Dict[str, Any]) -> Payment:
        try:
            with transaction.atomic():
                return Payment.objects.create(**record)
        except DatabaseError as e:
            raise StorageFailure("Failed to save payment") from e

    def update(self, owner_id, payment_id, patch: Dict[str, Any]) -> Optional[Payment]:
        """Apply ``patch`` and return the fresh row, or None if not owned."""
        try:
            with transaction.atomic():
                payment = self._owned(owner_id).select_for_update().filter(id=payment_id).first()
                if payment is None:
                    return None
                for field, value in patch.items():
                    setattr(payment, field, value)
                payment.save()
                return payment
        except DatabaseError as e:
            raise StorageFailure(f"Failed to update payment {payment_id}") from e

    def delete(self, owner_id, payment_id) -> bool:
        """Delete the row; False if nothing owned by ``owner_id`` matched."""
        try:
            with transaction.atomic():
                deleted, _ = self._owned(owner_id).filter(id=payment_id).delete()
                return deleted > 0
        except DatabaseError as e:
            raise StorageFailure(f"Failed to delete payment {payment_id}") from e
