import logging

from django.db.models import Count
from rest_framework.exceptions import ValidationError

from .models import (
    CandidateOnboardingRequest,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    OnboardingRequest,
    Profile,
)

logger = logging.getLogger(__name__)


STATUS_FILTER_ALL = "all"
STATUS_VALUES = [choice for choice, _label in MentorshipRequest.STATUS_CHOICES]

STATUS_DESCRIPTIONS = {
    MentorshipRequest.STATUS_PENDING: "Waiting for mentor response",
    MentorshipRequest.STATUS_ACCEPTED: "Mentor has accepted your request!",
    MentorshipRequest.STATUS_REJECTED: "Mentor has declined your request",
    MentorshipRequest.STATUS_CANCELLED: "Request has been cancelled",
}

UNKNOWN_EMAIL = "Unknown Email"
UNKNOWN_CANDIDATE = "Unknown Candidate"
UNKNOWN_MENTOR = "Unknown Mentor"


def status_description(status):
    return STATUS_DESCRIPTIONS.get(status, status)


def _status_of(row):
    return row["status"] if isinstance(row, dict) else row.status


def status_counts(rows):
    counts = {status: 0 for status in STATUS_VALUES}
    total = 0
    for row in rows:
        total += 1
        status = _status_of(row)
        counts[status] = counts.get(status, 0) + 1
    counts["total"] = total
    return counts


def approved_onboarding_data(model, user_ids):
    """Latest approved onboarding blob per user."""
    data = {}
    rows = (
        model.objects.filter(user_id__in=set(user_ids), status=OnboardingRequest.STATUS_APPROVED)
        .order_by("user_id", "-created_at", "-id")
        .values("user_id", "data")
    )
    for row in rows:
        data.setdefault(row["user_id"], row["data"] or {})
    return data


def _profiles_by_id(user_ids):
    return {
        row["user_id"]: row
        for row in Profile.objects.filter(user_id__in=set(user_ids)).values("user_id", "email", "display_name")
    }


def _request_fields(request):
    return {
        "id": request.id,
        "candidate_id": request.candidate_id,
        "mentor_id": request.mentor_id,
        "message": request.message,
        "status": request.status,
        "notes": request.notes,
        "created_at": request.created_at,
        "updated_at": request.updated_at,
    }


def _candidate_block(user_id, profiles, onboarding):
    profile = profiles.get(user_id) or {}
    return {
        "id": user_id,
        "email": profile.get("email") or UNKNOWN_EMAIL,
        "display_name": profile.get("display_name") or UNKNOWN_CANDIDATE,
        "candidate_data": onboarding.get(user_id) or {},
    }


def _mentor_profile_block(user_id, profiles):
    profile = profiles.get(user_id) or {}
    return {
        "id": user_id,
        "email": profile.get("email") or UNKNOWN_EMAIL,
        "display_name": profile.get("display_name") or UNKNOWN_MENTOR,
    }


def _mentor_block(data):
    return {
        "fullName": data.get("fullName") or UNKNOWN_MENTOR,
        "currentRole": data.get("currentRole"),
        "company": data.get("company"),
        "expertise": data.get("expertise"),
        "email": data.get("email"),
    }


def enrich_requests(requests):
    """Attach candidate and mentor details to each request.

    Missing profiles fall back to the "Unknown ..." placeholders instead of
    failing the listing.
    """
    requests = list(requests)
    user_ids = {r.candidate_id for r in requests} | {r.mentor_id for r in requests}
    profiles = _profiles_by_id(user_ids)
    candidate_data = approved_onboarding_data(CandidateOnboardingRequest, {r.candidate_id for r in requests})
    mentor_data = approved_onboarding_data(MentorOnboardingRequest, {r.mentor_id for r in requests})

    enriched = []
    for request in requests:
        row = _request_fields(request)
        row["candidate"] = _candidate_block(request.candidate_id, profiles, candidate_data)
        row["mentor_profile"] = _mentor_profile_block(request.mentor_id, profiles)
        row["mentor"] = _mentor_block(mentor_data.get(request.mentor_id) or {})
        row["status_description"] = status_description(request.status)
        enriched.append(row)
    return enriched


def request_details(request):
    return enrich_requests([request])[0]


def _matches(row, term):
    candidate = row.get("candidate") or {}
    fields = (
        (candidate.get("candidate_data") or {}).get("fullName"),
        candidate.get("display_name"),
        candidate.get("email"),
        row.get("message"),
    )
    return any(term in str(value).lower() for value in fields if value)


def filter_mentorship_requests(rows, status_filter=STATUS_FILTER_ALL, search=""):
    """Status filter (``all`` keeps everything) followed by a free-text search."""
    filtered = list(rows)
    if status_filter and status_filter != STATUS_FILTER_ALL:
        filtered = [row for row in filtered if row.get("status") == status_filter]
    term = (search or "").strip().lower()
    if term:
        filtered = [row for row in filtered if _matches(row, term)]
    return filtered


def respond_to_request(request, action):
    if request.status != MentorshipRequest.STATUS_PENDING:
        raise ValidationError({"detail": f"Only pending requests can be {action}ed."})
    request.status = MentorshipRequest.STATUS_ACCEPTED if action == "accept" else MentorshipRequest.STATUS_REJECTED
    request.save(update_fields=["status", "updated_at"])
    logger.info("Mentorship request %s %sed by mentor %s", request.pk, action, request.mentor_id)
    return request


def update_request_status(request, status, notes=None):
    request.status = status
    request.notes = notes or None
    request.save(update_fields=["status", "notes", "updated_at"])
    return request


def send_message_to_candidate(request, message):
    request.notes = message
    request.save(update_fields=["notes", "updated_at"])
    return request


def accepted_candidate_ids(mentor):
    ids = (
        MentorshipRequest.objects.filter(mentor=mentor, status=MentorshipRequest.STATUS_ACCEPTED)
        .order_by("-created_at", "-id")
        .values_list("candidate_id", flat=True)
    )
    return list(dict.fromkeys(ids))


def mentor_candidates(mentor):
    """Accepted requests of a mentor with candidate details and roadmap counts."""
    requests = list(
        MentorshipRequest.objects.filter(mentor=mentor, status=MentorshipRequest.STATUS_ACCEPTED).order_by(
            "-created_at", "-id"
        )
    )
    candidate_ids = {r.candidate_id for r in requests}
    profiles = _profiles_by_id(candidate_ids)
    onboarding = approved_onboarding_data(CandidateOnboardingRequest, candidate_ids)
    roadmap_counts = dict(
        LearningRoadmap.objects.filter(mentor=mentor, candidate_id__in=candidate_ids)
        .order_by()
        .values("candidate_id")
        .annotate(total=Count("id"))
        .values_list("candidate_id", "total")
    )
    return [
        {
            "id": request.id,
            "mentorship_request_id": request.id,
            "candidate_id": request.candidate_id,
            "message": request.message,
            "created_at": request.created_at,
            "updated_at": request.updated_at,
            "candidate": _candidate_block(request.candidate_id, profiles, onboarding),
            "roadmaps_count": roadmap_counts.get(request.candidate_id, 0),
        }
        for request in requests
    ]
