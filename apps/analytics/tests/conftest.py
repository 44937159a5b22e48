import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.payments.models import Payment


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_outsider(db):
    """Create a user whose payments must never show up in the main user's figures."""
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
        display_name='Analytics Outsider',
    )


@pytest.fixture
def analytics_user_client(api_client, analytics_user):
    """Return an authenticated API client for the analytics user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Payments
# =============================================================================

@pytest.fixture
def reference_date():
    """The "now" the dashboard tests pass explicitly."""
    return date(2025, 3, 31)


@pytest.fixture
def analytics_payments(analytics_user, reference_date):
    """
    Four payments for the analytics user:

    - two in the trailing 30 days (Kopi Bubuk 199000, Kopi Bijian 398000)
    - one in the 30 days before that (Kopi Bubuk 300000)
    - one older, uncategorized payment (Arabika 100000)
    """
    rows = [
        (date(2025, 3, 20), 'Kopi Bubuk', '1', 199000),
        (date(2025, 3, 25), 'Kopi Bijian', '2', 398000),
        (date(2025, 2, 10), 'kopi bubuk', '1.5', 300000),
        (date(2024, 12, 5), 'Arabika', '0.5', 100000),
    ]
    return [
        Payment.objects.create(
            owner=analytics_user,
            date=day,
            coffee_type=coffee_type,
            weight_kg=Decimal(weight),
            total_price=price,
        )
        for day, coffee_type, weight, price in rows
    ]


@pytest.fixture
def outsider_payment(analytics_outsider, reference_date):
    """A large payment from another user in the current window."""
    return Payment.objects.create(
        owner=analytics_outsider,
        date=reference_date,
        coffee_type='Kopi Bubuk',
        weight_kg=Decimal('10'),
        total_price=5000000,
    )
