"""Access decisions for the client's routes.

Every resolver reads fresh rows and returns a ``GuardDecision``. Nothing is
cached between calls. A database failure while deciding is logged and
resolves to a denial that sends the user to the resolver's fallback path.
"""
import functools
import logging
from dataclasses import dataclass

from django.db import DatabaseError

from .models import CandidateOnboardingRequest, MentorOnboardingRequest, OnboardingRequest
from .permissions import (
    ADMIN_ROLES,
    ROLE_ADMIN,
    ROLE_CANDIDATE,
    ROLE_MENTOR,
    ROLE_SUPER_ADMIN,
    user_roles,
)

logger = logging.getLogger(__name__)


LOGIN_PATH = "/auth/login"
PENDING_APPROVAL_PATH = "/onboarding/pending-approval"
CANDIDATE_ONBOARDING_PATH = "/onboarding/candidate"
MENTOR_ONBOARDING_PATH = "/onboarding/mentor"
CANDIDATE_DASHBOARD_PATH = "/candidate/dashboard"
MENTOR_DASHBOARD_PATH = "/mentor/dashboard"
ADMIN_DASHBOARD_PATH = "/admin/dashboard"

DASHBOARD_BY_ROLE = {
    ROLE_CANDIDATE: CANDIDATE_DASHBOARD_PATH,
    ROLE_MENTOR: MENTOR_DASHBOARD_PATH,
    ROLE_ADMIN: ADMIN_DASHBOARD_PATH,
    ROLE_SUPER_ADMIN: ADMIN_DASHBOARD_PATH,
}


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: str = None
    reason: str = ""

    def as_dict(self):
        return {"allowed": self.allowed, "redirect_to": self.redirect_to, "reason": self.reason}


def allow(reason="allowed"):
    return GuardDecision(True, None, reason)


def redirect(path, reason):
    return GuardDecision(False, path, reason)


def deny_on_database_error(fallback_path):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError:
                logger.error("Access check %s failed", func.__name__, exc_info=True)
                return redirect(fallback_path, "lookup_failed")

        return wrapper

    return decorator


def _is_anonymous(user):
    return user is None or not user.is_authenticated


def latest_status(model, user):
    request = model.latest_for(user.pk)
    return request.status if request else None


def has_pending_onboarding(user):
    return OnboardingRequest.STATUS_PENDING in (
        latest_status(CandidateOnboardingRequest, user),
        latest_status(MentorOnboardingRequest, user),
    )


def dashboard_for_first_role(role):
    return DASHBOARD_BY_ROLE.get(role, PENDING_APPROVAL_PATH)


@deny_on_database_error(LOGIN_PATH)
def resolve_route_access(user, required_roles=None):
    """Layout guard: login, onboarding state, then the any-of role check."""
    if _is_anonymous(user):
        return redirect(LOGIN_PATH, "unauthenticated")
    if has_pending_onboarding(user):
        return redirect(PENDING_APPROVAL_PATH, "onboarding_pending")
    roles = user_roles(user)
    if not roles:
        return redirect(PENDING_APPROVAL_PATH, "no_role")
    if required_roles and not any(role in roles for role in required_roles):
        return redirect(home_path_for_roles(roles), "role_mismatch")
    return allow()


@deny_on_database_error(LOGIN_PATH)
def resolve_protected_route(user, required_role=None, fallback_path=LOGIN_PATH):
    if _is_anonymous(user):
        return redirect(fallback_path, "unauthenticated")
    roles = user_roles(user)
    first_role = roles[0] if roles else None
    if required_role and first_role != required_role:
        return redirect(dashboard_for_first_role(first_role), "role_mismatch" if first_role else "no_role")
    return allow()


@deny_on_database_error(CANDIDATE_ONBOARDING_PATH)
def resolve_candidate_only_route(user, fallback_path=LOGIN_PATH):
    if _is_anonymous(user):
        return redirect(fallback_path, "unauthenticated")
    if ROLE_CANDIDATE not in user_roles(user):
        return redirect(CANDIDATE_ONBOARDING_PATH, "not_candidate")
    status = latest_status(CandidateOnboardingRequest, user)
    if status == OnboardingRequest.STATUS_PENDING:
        return redirect(PENDING_APPROVAL_PATH, "onboarding_pending")
    if status in (OnboardingRequest.STATUS_APPROVED, None):
        return allow()
    return redirect(CANDIDATE_ONBOARDING_PATH, f"onboarding_{status}")


def home_path_for_roles(roles):
    if any(role in ADMIN_ROLES for role in roles):
        return ADMIN_DASHBOARD_PATH
    if ROLE_MENTOR in roles:
        return MENTOR_DASHBOARD_PATH
    return CANDIDATE_DASHBOARD_PATH


@deny_on_database_error(LOGIN_PATH)
def resolve_role_redirect(user):
    if _is_anonymous(user):
        return redirect(LOGIN_PATH, "unauthenticated")
    return redirect(home_path_for_roles(user_roles(user)), "home")


def _approved_destination(model, user, dashboard_path, onboarding_path):
    latest = model.latest_for(user.pk)
    status = latest.status if latest else None
    if status != OnboardingRequest.STATUS_APPROVED:
        return redirect(PENDING_APPROVAL_PATH, f"onboarding_{status or 'missing'}")
    if isinstance(latest.data, dict) and len(latest.data) > 1:
        return redirect(dashboard_path, "approved")
    return redirect(onboarding_path, "profile_incomplete")


@deny_on_database_error(PENDING_APPROVAL_PATH)
def resolve_post_login_redirect(user):
    """Where a freshly signed-in user lands."""
    if _is_anonymous(user):
        return redirect(LOGIN_PATH, "unauthenticated")
    roles = user_roles(user)
    if any(role in ADMIN_ROLES for role in roles):
        return redirect(ADMIN_DASHBOARD_PATH, "admin")
    if ROLE_MENTOR in roles:
        return _approved_destination(
            MentorOnboardingRequest, user, MENTOR_DASHBOARD_PATH, MENTOR_ONBOARDING_PATH
        )
    if ROLE_CANDIDATE in roles:
        return _approved_destination(
            CandidateOnboardingRequest, user, CANDIDATE_DASHBOARD_PATH, CANDIDATE_ONBOARDING_PATH
        )
    return redirect(PENDING_APPROVAL_PATH, "no_role")


def resolve_pending_approval(user):
    """Onboarding statuses for the waiting page, plus where to go once approved."""
    payload = {"mentor_status": None, "candidate_status": None, "redirect_to": None}
    if _is_anonymous(user):
        payload["redirect_to"] = LOGIN_PATH
        return payload
    try:
        mentor_status = latest_status(MentorOnboardingRequest, user)
        candidate_status = latest_status(CandidateOnboardingRequest, user)
        payload.update(mentor_status=mentor_status, candidate_status=candidate_status)
        approved = OnboardingRequest.STATUS_APPROVED
        if approved in (mentor_status, candidate_status):
            roles = user_roles(user)
            if ROLE_MENTOR in roles:
                payload["redirect_to"] = MENTOR_DASHBOARD_PATH
            elif ROLE_CANDIDATE in roles:
                payload["redirect_to"] = CANDIDATE_DASHBOARD_PATH
    except DatabaseError:
        logger.error("Approval status lookup failed for user %s", user.pk, exc_info=True)
    return payload
