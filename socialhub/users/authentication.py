from __future__ import annotations

import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth that accepts the bearer header first, then the HttpOnly cookie.

    Browsers send the cookie set at login; API clients send the header.
    A stale cookie leaves the request anonymous so public endpoints still
    answer; protected ones reject it through their permissions.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(getattr(settings, "JWT_AUTH_COOKIE", "token"))
        if not raw_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
            user = self.get_user(validated_token)
        except AuthenticationFailed as exc:
            # InvalidToken is an AuthenticationFailed too.
            logger.debug("Ignoring unusable auth cookie: %s", exc)
            return None
        return user, validated_token
