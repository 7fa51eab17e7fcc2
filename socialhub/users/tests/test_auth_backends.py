import pytest
from django.contrib.auth import get_user_model

from socialhub.users.auth_backends import UsernameOrEmailBackend

pytestmark = pytest.mark.django_db
User = get_user_model()


class TestUsernameOrEmailBackend:
    def setup_method(self):
        self.backend = UsernameOrEmailBackend()
        self.password = "Sahm1232"  # noqa: S105  # Allow hardcoded password in test
        self.user = User.objects.create_user(
            username="test",
            email="test@gmail.com",
            password=self.password,
        )

    def test_authenticate_with_username(self):
        user = self.backend.authenticate(None, username="test", password=self.password)
        assert user == self.user

    def test_authenticate_with_email_case_insensitive(self):
        user = self.backend.authenticate(
            None,
            username="TEST@gmail.com",
            password=self.password,
        )
        assert user == self.user

    def test_authenticate_with_email_keyword(self):
        user = self.backend.authenticate(None, email="test@gmail.com", password=self.password)
        assert user == self.user

    def test_wrong_password(self):
        user = self.backend.authenticate(
            None,
            username="test",
            password="wrongpass",  # noqa: S106
        )
        assert user is None

    def test_unknown_user(self):
        assert self.backend.authenticate(None, username="nobody", password=self.password) is None

    def test_inactive_user(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])
        assert self.backend.authenticate(None, username="test", password=self.password) is None
