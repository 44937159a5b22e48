from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class CoffeeType(models.TextChoices):
    """Coffee types recognised by the dashboard; other labels are allowed."""
    BUBUK = 'Kopi Bubuk', 'Kopi Bubuk'
    BIJIAN = 'Kopi Bijian', 'Kopi Bijian'


class Payment(models.Model):
    """A single coffee sale recorded by a cashier."""

    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='payments',
        editable=False,
    )

    date = models.DateField()
    coffee_type = models.CharField(max_length=100)
    weight_kg = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0'))]
    )
    # Whole rupiah, no sub-units
    total_price = models.PositiveBigIntegerField()

    # Storage key of the receipt image, empty when absent
    image = models.CharField(max_length=255, blank=True, default='')

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['owner', 'date'], name='payments_owner_date_idx'),
            models.Index(fields=['date'], name='payments_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.coffee_type} {self.weight_kg} kg - Rp {self.total_price} ({self.date})"
