import os

from django.conf import settings
from rest_framework import serializers
from .models import Payment
from .services import AttachmentManager
from .services.payment_management import PRICE_MAX, WEIGHT_MAX

ALLOWED_IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp')


# =============================================================================
# Input Serializers
# =============================================================================

class PaymentInputSerializer(serializers.Serializer):
    """
    Validate payment create/update payloads (JSON or multipart).

    Fields:
        date (date): Transaction date, YYYY-MM-DD
        coffee_type (str): Coffee label, e.g. 'Kopi Bubuk'
        weight_kg (decimal): Weight in kilograms, >= 0
        total_price (int): Total price in rupiah, >= 0
        image (file): Optional receipt image
    """

    date = serializers.DateField()
    coffee_type = serializers.CharField(max_length=100)
    weight_kg = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=0, max_value=WEIGHT_MAX
    )
    total_price = serializers.IntegerField(min_value=0, max_value=PRICE_MAX)
    image = serializers.FileField(required=False, allow_empty_file=False, write_only=True)

    def validate_image(self, value):
        """Only image files within the upload size limit."""
        ext = os.path.splitext(value.name or '')[1].lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise serializers.ValidationError(
                f"Unsupported file type. Allowed: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}"
            )

        content_type = getattr(value, 'content_type', None)
        if content_type and not content_type.startswith('image/'):
            raise serializers.ValidationError('File must be an image')

        max_bytes = getattr(settings, 'PAYMENT_UPLOAD_MAX_BYTES', 5 * 1024 * 1024)
        if value.size > max_bytes:
            raise serializers.ValidationError(f'File too large (max {max_bytes} bytes)')

        return value


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Payment as returned by the API."""

    image_url = serializers.SerializerMethodField()
    owner_email = serializers.EmailField(source='owner.email', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'date',
            'coffee_type',
            'weight_kg',
            'total_price',
            'image',
            'image_url',
            'owner_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_image_url(self, obj):
        attachments = self.context.get('attachments') or AttachmentManager()
        url = attachments.url(obj.image)
        request = self.context.get('request')
        if url and request is not None:
            return request.build_absolute_uri(url)
        return url
