from django.urls import path
from rest_framework_simplejwt.views import TokenBlacklistView, TokenObtainPairView, TokenRefreshView

from accounts import views

urlpatterns = [
    # JWT
    path("token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("token/logout/", TokenBlacklistView.as_view(), name="token_logout"),

    path("register/", views.RegistrationAPIView.as_view(), name="register"),
    path("set-password/", views.SetPasswordAPIView.as_view(), name="set_password"),

    # Password reset by emailed code
    path("password-reset/", views.PasswordResetRequestAPIView.as_view(), name="password_reset"),
    path("password-reset/check/", views.PasswordResetCheckAPIView.as_view(), name="password_reset_check"),
    path("password-reset/confirm/", views.PasswordResetConfirmAPIView.as_view(), name="password_reset_confirm"),

    path("profile/", views.ProfileAPIView.as_view(), name="profile"),
    path("user/<int:pk>/", views.UserProfileAPIView.as_view(), name="user_profile"),
]
