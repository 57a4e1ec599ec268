import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from .models import (
    CandidateOnboardingRequest,
    LearningProgress,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    Profile,
    UserRole,
)

logger = logging.getLogger(__name__)

User = get_user_model()

SUPER_ADMIN_DISPLAY_NAME = "Super Admin"


def ensure_username(base: str) -> str:
    base = (base or "user").strip().lower().replace(" ", "_")
    candidate = base
    index = 1
    while User.objects.filter(username=candidate).exists():
        index += 1
        candidate = f"{base}_{index}"
    return candidate


def find_user_by_email(email):
    return User.objects.filter(email__iexact=(email or "").strip()).first()


def mirror_profile(user, email=None, display_name=None):
    """Copy account fields into the profile row. Failures are logged, not raised."""
    defaults = {"email": email if email is not None else user.email}
    if display_name is not None:
        defaults["display_name"] = display_name
    try:
        with transaction.atomic():
            profile, _ = Profile.objects.update_or_create(user=user, defaults=defaults)
        return profile
    except DatabaseError:
        logger.warning("Profile mirror failed for user %s", user.pk, exc_info=True)
        return None


def create_user_account(email, password, display_name="", is_active=True):
    """Create a confirmed account and mirror it into ``Profile``.

    Returns ``(user, profile_synced)``. The account creation itself raises on
    failure; the profile mirror does not.
    """
    email = email.strip().lower()
    with transaction.atomic():
        user = User.objects.create_user(
            username=ensure_username(email.split("@")[0]),
            email=email,
            password=password,
            is_active=is_active,
        )
    profile = mirror_profile(user, email=email, display_name=display_name or "")
    return user, profile is not None


def update_user_account(user, email, display_name=""):
    """Update the profile row, then the account email when it changed.

    The profile write is authoritative and raises on failure. The account email
    sync is best-effort; ``email_synced`` reports whether it went through.
    """
    email = email.strip().lower()
    with transaction.atomic():
        profile, _ = Profile.objects.update_or_create(
            user=user,
            defaults={"email": email, "display_name": display_name or ""},
        )

    email_synced = True
    if email != (user.email or "").lower():
        try:
            with transaction.atomic():
                user.email = email
                user.save(update_fields=["email"])
        except DatabaseError:
            email_synced = False
            logger.warning("Account email update failed for user %s", user.pk, exc_info=True)
    return profile, email_synced


@transaction.atomic
def admin_delete_user(user_id):
    """Remove the profile and all application rows of a user in one transaction."""
    deleted = {
        "roles": UserRole.objects.filter(user_id=user_id).delete()[0],
        "candidate_onboarding_requests": CandidateOnboardingRequest.objects.filter(user_id=user_id).delete()[0],
        "mentor_onboarding_requests": MentorOnboardingRequest.objects.filter(user_id=user_id).delete()[0],
        "learning_progress": LearningProgress.objects.filter(user_id=user_id).delete()[0],
        "learning_roadmaps": (
            LearningRoadmap.objects.filter(mentor_id=user_id) | LearningRoadmap.objects.filter(candidate_id=user_id)
        ).delete()[0],
        "mentorship_requests": (
            MentorshipRequest.objects.filter(candidate_id=user_id)
            | MentorshipRequest.objects.filter(mentor_id=user_id)
        ).delete()[0],
        "profiles": Profile.objects.filter(user_id=user_id).delete()[0],
    }
    logger.info("Deleted application rows for user %s: %s", user_id, deleted)
    return deleted


def delete_auth_account(user_id):
    with transaction.atomic():
        return User.objects.filter(pk=user_id).delete()[0] > 0


def delete_user_account(user_id):
    """Application rows first (authoritative), then the account (best-effort)."""
    deleted = admin_delete_user(user_id)
    try:
        account_deleted = delete_auth_account(user_id)
    except DatabaseError:
        account_deleted = False
        logger.warning("Account delete failed for user %s", user_id, exc_info=True)
    return {"deleted": deleted, "account_deleted": account_deleted}


def assign_role(user, role):
    """Insert a role row. A duplicate assignment raises ``IntegrityError``."""
    with transaction.atomic():
        return UserRole.objects.create(user=user, role=role)


def upsert_role(user, role):
    user_role, _ = UserRole.objects.get_or_create(user=user, role=role)
    return user_role


def remove_role(user, role):
    return UserRole.objects.filter(user=user, role=role).delete()[0]


def seed_super_admin(email=None, password=None):
    """Idempotently provision the configured super admin account."""
    email = (email or settings.SUPER_ADMIN_EMAIL).strip().lower()
    password = password or settings.SUPER_ADMIN_PASSWORD

    created = False
    with transaction.atomic():
        user = find_user_by_email(email)
        if user is None:
            user = User.objects.create_user(
                username=ensure_username(email.split("@")[0]),
                email=email,
                password=password,
                is_active=True,
            )
            created = True
        Profile.objects.update_or_create(
            user=user,
            defaults={"email": email, "display_name": SUPER_ADMIN_DISPLAY_NAME},
        )
        upsert_role(user, UserRole.ROLE_SUPER_ADMIN)

    if created:
        logger.info("Super admin %s created", email)
    return {"ok": True, "created": created, "user_id": user.pk, "email": email}
