from rest_framework_simplejwt.tokens import RefreshToken
from datetime import timedelta
from django.conf import settings
import logging
import time

logger = logging.getLogger(__name__)


class TokenManager:
    """Issues JWT access/refresh pairs carrying the user's role claims"""

    @staticmethod
    def generate_tokens(user):
        try:
            refresh = RefreshToken.for_user(user)

            # Custom claims
            refresh['email'] = user.email
            refresh['role'] = user.role

            access_token = refresh.access_token
            access_token['role'] = user.role

            access_expiry = settings.SIMPLE_JWT.get('ACCESS_TOKEN_LIFETIME', timedelta(minutes=15))
            refresh_expiry = settings.SIMPLE_JWT.get('REFRESH_TOKEN_LIFETIME', timedelta(days=14))

            return {
                'access_token': str(access_token),
                'refresh_token': str(refresh),
                'token_type': 'Bearer',
                'expires_in': int(access_expiry.total_seconds()),
                'refresh_expires_in': int(refresh_expiry.total_seconds()),
                'issued_at': int(time.time())
            }

        except Exception as e:
            logger.error(f"Failed to generate tokens for user {user.email}: {str(e)}")
            raise
