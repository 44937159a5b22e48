import pytest
from datetime import date
from decimal import Decimal
from django.core.files.storage import FileSystemStorage
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.payments.models import Payment
from apps.payments.services import AttachmentManager


# 1x1 transparent GIF
GIF_BYTES = (
    b'GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00'
    b'\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;'
)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Keep uploaded receipts out of the real MEDIA_ROOT."""
    settings.MEDIA_ROOT = str(tmp_path)
    settings.MEDIA_URL = '/media/'
    return tmp_path


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def cashier(db):
    """Create the main cashier user."""
    return User.objects.create_user(
        email='cashier@example.com',
        password='TestPass123!',
        display_name='Cashier',
    )


@pytest.fixture
def other_cashier(db):
    """Create a second cashier with their own payments."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Cashier',
    )


@pytest.fixture
def cashier_client(api_client, cashier):
    """Return an authenticated API client for the cashier."""
    refresh = RefreshToken.for_user(cashier)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture
def storage(media_root):
    """Filesystem storage rooted in a temporary directory."""
    return FileSystemStorage(location=str(media_root), base_url='/media/')


@pytest.fixture
def attachments(storage):
    """Attachment manager over the temporary storage."""
    return AttachmentManager(storage=storage, upload_dir='uploads')


@pytest.fixture
def gif_bytes():
    return GIF_BYTES


# =============================================================================
# Payments
# =============================================================================

@pytest.fixture
def payment(cashier):
    """A payment without a receipt."""
    return Payment.objects.create(
        owner=cashier,
        date=date(2025, 3, 1),
        coffee_type='Kopi Bubuk',
        weight_kg=Decimal('1.500'),
        total_price=199000,
    )


@pytest.fixture
def payment_with_receipt(cashier, attachments, gif_bytes):
    """A payment whose receipt exists in storage."""
    key = attachments.store(gif_bytes, 'nota.gif')
    return Payment.objects.create(
        owner=cashier,
        date=date(2025, 3, 2),
        coffee_type='Kopi Bijian',
        weight_kg=Decimal('2.000'),
        total_price=250000,
        image=key,
    )


@pytest.fixture
def foreign_payment(other_cashier):
    """A payment owned by someone else."""
    return Payment.objects.create(
        owner=other_cashier,
        date=date(2025, 3, 1),
        coffee_type='Kopi Bubuk',
        weight_kg=Decimal('1.000'),
        total_price=100000,
    )
