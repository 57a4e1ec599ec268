from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView

from .permissions import ADMIN_ROLES, user_roles


class PreplacedTokenObtainPairSerializer(TokenObtainPairSerializer):
    password = serializers.CharField(write_only=True)

    default_error_messages = {
        "no_active_account": "No active account found with the given credentials",
        "not_admin": "This account does not have admin access",
    }
    allowed_roles = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop("username", None)
        self.fields["email"] = serializers.EmailField(write_only=True)
        self.fields["password"] = serializers.CharField(write_only=True)

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["roles"] = user_roles(user)
        token["email"] = user.email
        return token

    def validate(self, attrs):
        email = attrs.get("email", "").strip().lower()
        password = attrs.get("password", "")
        user_model = get_user_model()
        user = user_model.objects.filter(email__iexact=email).first()
        if not user:
            raise exceptions.AuthenticationFailed(
                self.error_messages["no_active_account"],
                "no_active_account",
            )

        authenticate_kwargs = {
            user_model.USERNAME_FIELD: getattr(user, user_model.USERNAME_FIELD),
            "password": password,
        }
        request = self.context.get("request")
        if request is not None:
            authenticate_kwargs["request"] = request

        self.user = authenticate(**authenticate_kwargs)
        if not api_settings.USER_AUTHENTICATION_RULE(self.user):
            raise exceptions.AuthenticationFailed(
                self.error_messages["no_active_account"],
                "no_active_account",
            )

        roles = user_roles(self.user)
        if self.allowed_roles is not None and not set(roles) & set(self.allowed_roles):
            raise exceptions.PermissionDenied(self.error_messages["not_admin"])

        refresh = self.get_token(self.user)
        data = {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "roles": roles,
        }

        if api_settings.UPDATE_LAST_LOGIN:
            update_last_login(None, self.user)

        return data


class PreplacedAdminTokenObtainPairSerializer(PreplacedTokenObtainPairSerializer):
    allowed_roles = ADMIN_ROLES


class PreplacedTokenObtainPairView(TokenObtainPairView):
    serializer_class = PreplacedTokenObtainPairSerializer


class PreplacedAdminTokenObtainPairView(TokenObtainPairView):
    serializer_class = PreplacedAdminTokenObtainPairSerializer
