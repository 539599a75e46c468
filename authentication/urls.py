from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.auth.views import UserRegistrationView, UserLoginView, CurrentUserView

urlpatterns = [
    path('register/', UserRegistrationView.as_view(), name='register'),
    path('login/', UserLoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('me/', CurrentUserView.as_view(), name='current-user'),
]
