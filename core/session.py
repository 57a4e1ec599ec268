from dataclasses import dataclass, field

from .models import Profile
from .permissions import user_roles


@dataclass
class AuthContext:
    user: object
    roles: list = field(default_factory=list)
    profile: dict = field(default_factory=dict)

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def primary_role(self):
        return self.roles[0] if self.roles else None

    def has_role(self, role):
        return role in self.roles

    def has_any_role(self, roles):
        return any(role in self.roles for role in roles)

    def as_dict(self):
        user = self.user
        return {
            "user": None if user is None else {"id": user.pk, "email": user.email},
            "roles": list(self.roles),
            "profile": self.profile or None,
        }


def profile_payload(user):
    profile = Profile.objects.filter(user_id=user.pk).first()
    if profile is None:
        return {"id": user.pk, "email": user.email, "display_name": None}
    return {
        "id": profile.pk,
        "email": profile.email or user.email,
        "display_name": profile.display_name or None,
    }


def get_auth_context(user):
    """Current user, their role names and profile row, or an empty context when anonymous."""
    if user is None or not user.is_authenticated:
        return AuthContext(user=None)
    return AuthContext(user=user, roles=user_roles(user), profile=profile_payload(user))
