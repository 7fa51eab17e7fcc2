from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.conf import settings
from rest_framework_simplejwt.tokens import AccessToken
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError

from socialhub.realtime.auth import ConnectionAuthenticator
from socialhub.realtime.auth import parse_cookie
from socialhub.realtime.exceptions import Unauthorized


def test_parse_cookie_trims_and_url_decodes():
    cookies = parse_cookie(" theme=dark ; token=a%2Eb%2Ec;empty=; =orphan")

    assert cookies == {"theme": "dark", "token": "a.b.c", "empty": ""}


def test_parse_cookie_without_header():
    assert parse_cookie(None) == {}
    assert parse_cookie("") == {}


class TestExtractToken:
    def setup_method(self):
        self.authenticator = ConnectionAuthenticator(cookie_name="token")

    def test_auth_payload_wins(self):
        environ = {
            "HTTP_AUTHORIZATION": "Bearer from-header",
            "HTTP_COOKIE": "token=from-cookie",
        }
        token = self.authenticator.extract_token(environ, {"token": "from-auth"})
        assert token == "from-auth"

    def test_bearer_header_before_cookie(self):
        environ = {
            "HTTP_AUTHORIZATION": "Bearer from-header",
            "HTTP_COOKIE": "token=from-cookie",
        }
        assert self.authenticator.extract_token(environ, None) == "from-header"

    def test_cookie_is_last_resort(self):
        environ = {"HTTP_COOKIE": "other=1; token=from-cookie"}
        assert self.authenticator.extract_token(environ, {}) == "from-cookie"

    def test_headers_from_asgi_scope(self):
        environ = {
            "asgi.scope": {
                "headers": [
                    (b"cookie", b"token=scoped-cookie"),
                    (b"authorization", b"Bearer scoped-header"),
                ],
            },
        }
        assert self.authenticator.extract_token(environ, None) == "scoped-header"

    def test_foreign_scheme_falls_through_to_cookie(self):
        environ = {
            "HTTP_AUTHORIZATION": "Basic dXNlcjpwYXNz",
            "HTTP_COOKIE": "token=from-cookie",
        }
        assert self.authenticator.extract_token(environ, None) == "from-cookie"

    def test_nothing_found(self):
        assert self.authenticator.extract_token({}, None) is None
        assert self.authenticator.extract_token(None, "not-a-dict") is None


@pytest.mark.django_db(transaction=True)
class TestAuthenticate:
    def setup_method(self):
        self.authenticator = ConnectionAuthenticator()

    def test_valid_token_resolves_user_id(self, user):
        token = str(AccessToken.for_user(user))
        user_id = async_to_sync(self.authenticator.authenticate)({}, {"token": token})
        assert user_id == user.pk

    def test_valid_cookie_resolves_user_id(self, user):
        token = str(AccessToken.for_user(user))
        environ = {"HTTP_COOKIE": f"{settings.JWT_AUTH_COOKIE}={token}"}
        assert async_to_sync(self.authenticator.authenticate)(environ) == user.pk

    def test_missing_credential_is_unauthorized(self):
        with pytest.raises(Unauthorized) as excinfo:
            async_to_sync(self.authenticator.authenticate)({}, None)
        assert isinstance(excinfo.value, SocketConnectionRefusedError)
        assert excinfo.value.error_args["message"] == "Unauthorized"

    def test_tampered_token_is_unauthorized(self, user):
        token = str(AccessToken.for_user(user))
        with pytest.raises(Unauthorized):
            async_to_sync(self.authenticator.authenticate)({}, {"token": token[:-2] + "xx"})

    def test_expired_token_is_unauthorized(self, user):
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        with pytest.raises(Unauthorized):
            async_to_sync(self.authenticator.authenticate)({}, {"token": str(token)})

    def test_garbage_token_is_unauthorized(self):
        with pytest.raises(Unauthorized):
            async_to_sync(self.authenticator.authenticate)({}, {"token": "not-a-jwt"})

    def test_inactive_user_is_unauthorized(self, user):
        token = str(AccessToken.for_user(user))
        user.is_active = False
        user.save(update_fields=["is_active"])
        with pytest.raises(Unauthorized):
            async_to_sync(self.authenticator.authenticate)({}, {"token": token})

    def test_malformed_bearer_header_is_unauthorized(self):
        environ = {"HTTP_AUTHORIZATION": "Bearer"}
        with pytest.raises(Unauthorized):
            async_to_sync(self.authenticator.authenticate)(environ)
