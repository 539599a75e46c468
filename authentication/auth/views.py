import logging

from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema

from authentication.core.base_view import BaseAPIView
from authentication.core.response import standardized_response
from authentication.serializers import (
    UserBaseSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    AuthResponseSerializer,
)
from .services import AuthenticationService

logger = logging.getLogger(__name__)


class UserRegistrationView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Authentication"],
        request=UserRegistrationSerializer,
        responses={201: AuthResponseSerializer, 400: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        success, response_data, status_code = AuthenticationService.register(
            request=request,
            **serializer.validated_data,
        )
        return Response(standardized_response(**response_data), status=status_code)


class UserLoginView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Authentication"],
        request=UserLoginSerializer,
        responses={200: AuthResponseSerializer, 401: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = UserLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        success, response_data, status_code = AuthenticationService.login(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
            request=request,
        )
        return Response(standardized_response(**response_data), status=status_code)


class CurrentUserView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Authentication"], responses={200: UserBaseSerializer})
    def get(self, request):
        serializer = UserBaseSerializer(request.user, context={'request': request})
        return Response(standardized_response(data=serializer.data))
