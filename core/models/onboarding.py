from django.conf import settings
from django.db import models


class OnboardingRequest(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    data = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ("-created_at", "-id")

    @classmethod
    def latest_for(cls, user_id):
        return cls.objects.filter(user_id=user_id).order_by("-created_at", "-id").first()


class CandidateOnboardingRequest(OnboardingRequest):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="candidate_onboarding_requests",
    )

    class Meta(OnboardingRequest.Meta):
        pass

    def __str__(self) -> str:
        return f"Candidate onboarding #{self.id} for {self.user_id} ({self.status})"


class MentorOnboardingRequest(OnboardingRequest):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="mentor_onboarding_requests",
    )

    class Meta(OnboardingRequest.Meta):
        pass

    def __str__(self) -> str:
        return f"Mentor onboarding #{self.id} for {self.user_id} ({self.status})"
