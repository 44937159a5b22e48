from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

UserModel = get_user_model()


class EmailBackend(ModelBackend):
    """
    Log in with the account email, ignoring its case.

    Accepts ``email=`` from the API and ``username=`` from the admin login
    form. Inactive accounts are rejected by ``user_can_authenticate``.
    """

    def authenticate(self, request, email=None, password=None, **kwargs):
        if email is None:
            email = kwargs.get('username')
        if not email or password is None:
            return None

        try:
            user = UserModel._default_manager.get(email__iexact=email)
        except UserModel.DoesNotExist:
            # Run the hasher anyway so unknown emails take as long as wrong passwords
            UserModel().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
