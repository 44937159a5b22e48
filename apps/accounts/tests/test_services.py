import pytest
from django.contrib.auth import authenticate

from apps.accounts.services import (
    authenticate_user,
    InvalidCredentialsError,
    InactiveAccountError,
)


@pytest.mark.django_db
class TestAuthenticateUser:
    """Tests for authenticate_user."""

    def test_valid_credentials(self, user):
        assert authenticate_user(email=user.email, password='TestPass123!') == user

    def test_email_case_ignored(self, user):
        assert authenticate_user(email='TESTUSER@example.COM', password='TestPass123!') == user

    def test_sets_last_login(self, user):
        assert user.last_login is None

        authenticate_user(email=user.email, password='TestPass123!')

        user.refresh_from_db()
        assert user.last_login is not None

    def test_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='nope')

        user.refresh_from_db()
        assert user.last_login is None

    def test_unknown_email(self, db):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='ghost@example.com', password='TestPass123!')

    def test_inactive_account(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')

    def test_inactive_account_wrong_password(self, user_inactive):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user_inactive.email, password='nope')


@pytest.mark.django_db
class TestEmailBackend:
    """Tests for the email authentication backend."""

    def test_admin_form_username_keyword(self, user):
        assert authenticate(None, username='TestUser@example.com', password='TestPass123!') == user

    def test_inactive_rejected(self, user_inactive):
        assert authenticate(None, email=user_inactive.email, password='TestPass123!') is None

    def test_missing_password(self, user):
        assert authenticate(None, email=user.email, password=None) is None
