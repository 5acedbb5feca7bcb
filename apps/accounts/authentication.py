import logging

from django.core.exceptions import ValidationError
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .models import User
from .services.exceptions import InvalidTokenError
from .tokens import decode_token

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(JWTAuthentication):
    """
    Resolve ``Authorization: Bearer <token>`` into a user.

    ``request.auth`` is set to the decoded identity ``{user_id, email}``.
    A missing or non-Bearer header leaves the request anonymous so the
    permission layer answers 401; a bad token fails immediately with 401.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        try:
            identity = decode_token(raw_token.decode())
        except InvalidTokenError as e:
            logger.debug("Rejected bearer token: %s", e)
            raise InvalidToken('Invalid or expired token')

        try:
            user = User.objects.get(id=identity['user_id'])
        except (User.DoesNotExist, ValidationError):
            raise InvalidToken('Invalid or expired token')

        if not user.is_active:
            raise InvalidToken('Invalid or expired token')

        return user, identity
