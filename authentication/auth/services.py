import logging
from django.utils import timezone
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError

from authentication.serializers import UserBaseSerializer
from authentication.core.jwt_utils import TokenManager
from authentication.models import CustomUser

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Service class to handle authentication-related business logic"""

    @staticmethod
    def register(email, password, phone_number=None, full_name=None, request=None):
        """Register a customer account and hand back a fresh token pair"""
        if not email or not password:
            return False, {"success": False, "error": "Email and password are required."}, 400

        if CustomUser.objects.filter(email__iexact=email).exists():
            return False, {"success": False, "error": "A user with this email already exists"}, 400

        try:
            validate_password(password)
        except ValidationError as e:
            return False, {"success": False, "error": ", ".join(e.messages)}, 400

        user = CustomUser.objects.create_user(
            email=email,
            password=password,
            role=CustomUser.Role.CUSTOMER,
            full_name=full_name or '',
            phone_number=phone_number or None,
        )

        context = {'request': request} if request else {}
        serializer = UserBaseSerializer(user, context=context)
        tokens = TokenManager.generate_tokens(user)
        logger.info(f"Registration successful for user: {user.email}")

        return True, {
            "success": True,
            "message": "Registration successful",
            "data": {
                'user': serializer.data,
                'tokens': tokens,
                'is_new_user': True,
            }
        }, 201

    @staticmethod
    def login(email, password, request=None):
        """Handle user login with email and password"""
        if not email or not password:
            return False, {"success": False, "error": "Email and password are required."}, 400

        user = authenticate(username=email, password=password)
        if not user:
            logger.warning(f"Failed login attempt for email: {email}")
            return False, {"success": False, "error": "Invalid email or password"}, 401

        if not user.is_active:
            logger.warning(f"Login attempt for disabled account: {email}")
            return False, {"success": False, "error": "Account is disabled. Please contact support."}, 403

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        context = {'request': request} if request else {}
        serializer = UserBaseSerializer(user, context=context)
        tokens = TokenManager.generate_tokens(user)
        logger.info(f"Login successful for user: {user.email}")

        return True, {
            "success": True,
            "message": "Login successful",
            "data": {
                'user': serializer.data,
                'tokens': tokens,
            }
        }, 200
