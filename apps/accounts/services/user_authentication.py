"""
Login service.

Looks users up by email without regard to case. A missing account still
pays for one password hash so response time doesn't reveal which emails
are registered.
"""

import logging

from django.contrib.auth.models import update_last_login

from apps.accounts.models import User

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: If account is deactivated
    """
    user = User.objects.filter(email__iexact=email.strip()).first()

    if user is None:
        User().set_password(password)
        logger.info("Login failed: unknown email")
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Login failed for user %s: wrong password", user.id)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    update_last_login(None, user)
    return user
