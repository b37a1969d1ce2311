"""
URL configuration for authentication, profile and recovery endpoints.
"""

from django.urls import include, path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    LogoutView,
    PasswordResetConfirmRedirectView,
    ProfileView,
    RecoveryAnswerView,
    RecoveryQuestionView,
    SecurityQuestionView,
)

urlpatterns = [
    # Custom logout endpoint with JWT token handling
    path("auth/custom-logout/", LogoutView.as_view(), name="custom-logout"),
    # Registration endpoints (signup, e-mail verification)
    path("auth/registration/", include("dj_rest_auth.registration.urls")),
    # Reset links e-mailed by dj-rest-auth resolve to this name
    path(
        "auth/password/reset/confirm/<str:uidb64>/<str:token>/",
        PasswordResetConfirmRedirectView.as_view(),
        name="password_reset_confirm",
    ),
    # Standard authentication endpoints (login, password reset, user details)
    path("auth/", include("dj_rest_auth.urls")),
    # JWT token refresh endpoint
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # Profile settings
    path("me/", ProfileView.as_view(), name="profile"),
    path("me/security/", SecurityQuestionView.as_view(), name="profile-security"),
    # Security-question recovery
    path("recovery/question/", RecoveryQuestionView.as_view(), name="recovery-question"),
    path("recovery/answer/", RecoveryAnswerView.as_view(), name="recovery-answer"),
]
