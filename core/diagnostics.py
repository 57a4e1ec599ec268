"""Operator helpers behind the debugging and setup management commands."""
import logging

from django.db import transaction

from .accounts import create_user_account, find_user_by_email, mirror_profile, upsert_role
from .models import (
    CandidateOnboardingRequest,
    MentorOnboardingRequest,
    MentorshipRequest,
    Profile,
    UserRole,
)
from .permissions import user_roles

logger = logging.getLogger(__name__)

DEFAULT_TEST_PASSWORD = "TempPass123!"

TEST_MENTOR_DATA = {
    "fullName": "Test Mentor",
    "currentRole": "Senior Software Engineer",
    "company": "Preplaced",
    "experienceYears": 6,
    "expertise": ["System Design", "Data Structures", "Interview Preparation"],
    "bio": "Helps candidates prepare for product company interviews.",
}

TEST_CANDIDATE_DATA = {
    "fullName": "Test Candidate",
    "targetRole": "Software Engineer",
    "experienceLevel": "fresher",
    "skills": ["Python", "JavaScript"],
}


def _onboarding_rows(model, user_id):
    return [
        {
            "id": row.id,
            "status": row.status,
            "data": row.data,
            "created_at": row.created_at.isoformat(),
        }
        for row in model.objects.filter(user_id=user_id).order_by("-created_at", "-id")
    ]


def debug_user_report(email):
    user = find_user_by_email(email)
    if user is None:
        return {"email": email, "found": False}

    profile = Profile.objects.filter(user=user).first()
    candidate_requests = _onboarding_rows(CandidateOnboardingRequest, user.pk)
    mentor_requests = _onboarding_rows(MentorOnboardingRequest, user.pk)
    roles = user_roles(user)
    return {
        "email": email,
        "found": True,
        "user_id": user.pk,
        "is_active": user.is_active,
        "profile": (
            {"email": profile.email, "display_name": profile.display_name}
            if profile
            else None
        ),
        "roles": roles,
        "candidate_onboarding_requests": candidate_requests,
        "mentor_onboarding_requests": mentor_requests,
        "checks": {
            "has_profile": profile is not None,
            "has_role": bool(roles),
            "has_pending_onboarding": any(
                row["status"] == CandidateOnboardingRequest.STATUS_PENDING
                for row in candidate_requests + mentor_requests
            ),
        },
    }


def debug_mentorship_report(mentor_email, limit=5):
    mentor = find_user_by_email(mentor_email)
    if mentor is None:
        return {"email": mentor_email, "found": False}

    rows = MentorshipRequest.objects.filter(mentor=mentor).order_by("-created_at", "-id")
    counts = {status: 0 for status, _ in MentorshipRequest.STATUS_CHOICES}
    for status in rows.values_list("status", flat=True):
        counts[status] = counts.get(status, 0) + 1
    counts["total"] = sum(counts.values())

    return {
        "email": mentor_email,
        "found": True,
        "mentor_id": mentor.pk,
        "is_mentor": UserRole.ROLE_MENTOR in user_roles(mentor),
        "counts": counts,
        "latest": [
            {
                "id": row.id,
                "candidate_id": row.candidate_id,
                "status": row.status,
                "message": row.message,
                "created_at": row.created_at.isoformat(),
            }
            for row in rows[:limit]
        ],
    }


def _approved_onboarding(model, user, data):
    latest = model.latest_for(user.pk)
    if latest is not None and latest.status == model.STATUS_APPROVED:
        return latest, False
    return model.objects.create(user=user, data=data, status=model.STATUS_APPROVED), True


@transaction.atomic
def create_candidate_user(email, password=None, display_name=""):
    user = find_user_by_email(email)
    created = user is None
    if created:
        user, _ = create_user_account(
            email,
            password or DEFAULT_TEST_PASSWORD,
            display_name=display_name or email.split("@")[0],
        )
    else:
        mirror_profile(user, display_name=display_name or None)

    upsert_role(user, UserRole.ROLE_CANDIDATE)
    request, request_created = _approved_onboarding(
        CandidateOnboardingRequest,
        user,
        {**TEST_CANDIDATE_DATA, "email": user.email},
    )
    logger.info("Candidate user %s ready (created=%s)", user.email, created)
    return {
        "ok": True,
        "created": created,
        "user_id": user.pk,
        "email": user.email,
        "roles": user_roles(user),
        "onboarding_request_id": request.id,
        "onboarding_request_created": request_created,
    }


@transaction.atomic
def setup_test_mentor(email):
    user = find_user_by_email(email)
    if user is None:
        return {"ok": False, "email": email, "error": "User not found"}

    upsert_role(user, UserRole.ROLE_MENTOR)
    request, request_created = _approved_onboarding(
        MentorOnboardingRequest,
        user,
        {**TEST_MENTOR_DATA, "email": user.email},
    )
    mirror_profile(user, display_name=TEST_MENTOR_DATA["fullName"])
    logger.info("Test mentor %s ready", user.email)
    return {
        "ok": True,
        "user_id": user.pk,
        "email": user.email,
        "roles": user_roles(user),
        "onboarding_request_id": request.id,
        "onboarding_request_created": request_created,
    }
