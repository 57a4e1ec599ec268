"""Aggregates behind the mentor, candidate and admin dashboards."""
from collections import OrderedDict
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Max
from django.utils import timezone

from .mentorship import accepted_candidate_ids, enrich_requests, status_counts
from .models import (
    CandidateOnboardingRequest,
    LearningProgress,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    OnboardingRequest,
    Profile,
    UserRole,
)

User = get_user_model()

PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_PERIOD = "30d"
CANDIDATE_PROGRESS_LIMIT = 5
ACTIVE_WINDOW = timedelta(days=7)
RECENT_REQUESTS_LIMIT = 5


def period_start(period, now=None):
    now = now or timezone.now()
    return now - timedelta(days=PERIOD_DAYS.get(period, PERIOD_DAYS[DEFAULT_PERIOD]))


def group_requests_by_day(rows):
    """``rows`` are ``(created_at, status)`` pairs. Days come back in ascending order."""
    days = OrderedDict()
    for created_at, status in sorted(rows, key=lambda row: row[0]):
        day = timezone.localtime(created_at).date() if timezone.is_aware(created_at) else created_at.date()
        bucket = days.setdefault(day, {"received": 0, "accepted": 0})
        bucket["received"] += 1
        if status == MentorshipRequest.STATUS_ACCEPTED:
            bucket["accepted"] += 1
    return [
        {"date": day.isoformat(), "label": f"{day:%b} {day.day}", **counts}
        for day, counts in days.items()
    ]


def request_rates(total, accepted):
    if not total:
        return {"acceptance_rate": 0.0, "rejection_rate": 0.0}
    return {
        "acceptance_rate": round(accepted / total * 100, 2),
        "rejection_rate": round((total - accepted) / total * 100, 2),
    }


def progress_status(progress, last_activity, now=None):
    now = now or timezone.now()
    if progress >= 100:
        return "completed"
    if last_activity and now - last_activity <= ACTIVE_WINDOW:
        return "active"
    return "stalled"


def candidate_progress(mentor, now=None):
    now = now or timezone.now()
    candidate_ids = accepted_candidate_ids(mentor)[:CANDIDATE_PROGRESS_LIMIT]
    aggregates = {
        row["user_id"]: row
        for row in LearningProgress.objects.filter(user_id__in=candidate_ids)
        .values("user_id")
        .annotate(avg_progress=Avg("progress_percentage"), last_activity=Max("last_updated"))
    }
    names = dict(Profile.objects.filter(user_id__in=candidate_ids).values_list("user_id", "display_name"))

    progress = []
    for index, candidate_id in enumerate(candidate_ids, start=1):
        row = aggregates.get(candidate_id) or {}
        value = round(row.get("avg_progress") or 0)
        last_activity = row.get("last_activity")
        progress.append(
            {
                "id": candidate_id,
                "name": names.get(candidate_id) or f"Candidate {index}",
                "progress": value,
                "last_activity": last_activity,
                "status": progress_status(value, last_activity, now),
            }
        )
    return progress


def mentor_insights(mentor, period=DEFAULT_PERIOD, now=None):
    now = now or timezone.now()
    if period not in PERIOD_DAYS:
        period = DEFAULT_PERIOD
    rows = MentorshipRequest.objects.filter(mentor=mentor, created_at__gte=period_start(period, now)).values_list(
        "created_at", "status"
    )
    requests_by_day = group_requests_by_day(list(rows))
    total = sum(day["received"] for day in requests_by_day)
    accepted = sum(day["accepted"] for day in requests_by_day)

    progress = candidate_progress(mentor, now)
    avg_progress = round(sum(c["progress"] for c in progress) / len(progress), 2) if progress else 0

    return {
        "period": period,
        "requests_by_day": requests_by_day,
        "total_requests": total,
        "accepted_requests": accepted,
        **request_rates(total, accepted),
        "earnings_available": False,
        "earnings": None,
        "total_earnings": None,
        "avg_earnings_per_month": None,
        "candidate_progress": progress,
        "active_candidates": sum(1 for c in progress if c["status"] == "active"),
        "completed_candidates": sum(1 for c in progress if c["status"] == "completed"),
        "avg_progress": avg_progress,
    }


def mentor_dashboard(mentor):
    requests = MentorshipRequest.objects.filter(mentor=mentor).order_by("-created_at", "-id")
    counts = status_counts(requests.only("status"))
    return {
        "counts": counts,
        "accepted_candidates": len(accepted_candidate_ids(mentor)),
        "recent_requests": enrich_requests(requests[:RECENT_REQUESTS_LIMIT]),
    }


def candidate_dashboard(candidate):
    requests = MentorshipRequest.objects.filter(candidate=candidate).order_by("-created_at", "-id")
    progress = LearningProgress.objects.filter(user=candidate).order_by("-last_updated", "-id")
    return {
        "counts": status_counts(requests.only("status")),
        "recent_requests": enrich_requests(requests[:RECENT_REQUESTS_LIMIT]),
        "learning_progress": [
            {
                "skill_name": row.skill_name,
                "progress_percentage": row.progress_percentage,
                "last_updated": row.last_updated,
            }
            for row in progress
        ],
        "total_roadmaps": LearningRoadmap.objects.filter(candidate=candidate).count(),
    }


def admin_analytics():
    role_counts = {role: 0 for role, _label in UserRole.ROLE_CHOICES}
    for row in UserRole.objects.values("role").annotate(total=Count("id")):
        role_counts[row["role"]] = row["total"]
    return {
        "total_users": User.objects.count(),
        "users_by_role": role_counts,
        "pending_mentor_onboarding": MentorOnboardingRequest.objects.filter(
            status=OnboardingRequest.STATUS_PENDING
        ).count(),
        "pending_candidate_onboarding": CandidateOnboardingRequest.objects.filter(
            status=OnboardingRequest.STATUS_PENDING
        ).count(),
        "mentorship_requests": status_counts(MentorshipRequest.objects.only("status")),
    }
