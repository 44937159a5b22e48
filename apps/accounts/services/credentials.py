"""Cashier login: check email/password and stamp the login time."""

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()


def _is_deactivated(email: str, password: str) -> bool:
    account = User.objects.filter(email__iexact=email, is_active=False).first()
    return account is not None and account.check_password(password)


def authenticate_user(*, email: str, password: str, request=None) -> User:
    """
    Resolve a cashier from login credentials.

    Credentials go through the configured authentication backends
    (``EmailBackend``), so the API and the admin share one login rule.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password.
        InactiveAccountError: Correct password for a deactivated account.
    """
    user = authenticate(request, email=email, password=password)

    if user is None:
        # Only reveal deactivation to someone who knows the password
        if _is_deactivated(email, password):
            raise InactiveAccountError("Account is deactivated")
        raise InvalidCredentialsError("Invalid email or password")

    update_last_login(None, user)
    return user
