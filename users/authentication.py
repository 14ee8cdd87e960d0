# authentication.py
import logging

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

logger = logging.getLogger(__name__)


class JWTCookieAuthentication(JWTAuthentication):
    def authenticate(self, request):
        # Get JWT from HTTP-only cookie
        raw_token = request.COOKIES.get('access_token')

        if not raw_token:
            # No JWT token found, let other authentication methods handle it
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except (InvalidToken, AuthenticationFailed) as e:
            logger.warning("JWT cookie authentication failed: %s", e)
            return None
