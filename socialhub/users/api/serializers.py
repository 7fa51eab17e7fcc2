from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from socialhub.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "created_at"]
        read_only_fields = ["created_at"]


class PublicUserSerializer(serializers.ModelSerializer[User]):
    """Profile view for other users; hides the email address."""

    class Meta:
        model = User
        fields = ["id", "username", "name", "created_at"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        username = attrs["username"]
        email = attrs["email"]
        if User.objects.filter(username__iexact=username).exists() or (
            User.objects.filter(email__iexact=email).exists()
        ):
            raise serializers.ValidationError(
                "User or email already exists", code="conflict"
            )
        validate_password(attrs["password"])
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
        )


class LoginSerializer(serializers.Serializer):
    """Accepts either an email or a username in ``email``."""

    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get("request"),
            username=attrs["email"],
            password=attrs["password"],
        )
        if user is None:
            raise serializers.ValidationError(
                "Invalid credentials", code="authorization"
            )
        attrs["user"] = user
        return attrs


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetTokenSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class ResetPasswordSerializer(ResetTokenSerializer):
    new_password = serializers.CharField(
        write_only=True,
        min_length=6,
        trim_whitespace=False,
    )

    def validate_new_password(self, value):
        validate_password(value)
        return value
