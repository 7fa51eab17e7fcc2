from django.urls import path

from .auth_views import CookieLoginView
from .auth_views import ForgotPasswordView
from .auth_views import LogoutView
from .auth_views import RegisterView
from .auth_views import ResetPasswordView
from .auth_views import VerifyResetTokenView

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", CookieLoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password/", ResetPasswordView.as_view(), name="reset-password"),
    path(
        "verify-reset-token/",
        VerifyResetTokenView.as_view(),
        name="verify-reset-token",
    ),
]
