from django.conf import settings
from django.db import models

from .mentorship import MentorshipRequest


class LearningProgress(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="learning_progress",
    )
    skill_name = models.CharField(max_length=120)
    progress_percentage = models.PositiveSmallIntegerField(default=0)
    last_updated = models.DateTimeField()

    class Meta:
        ordering = ("-last_updated", "-id")
        constraints = [
            models.UniqueConstraint(fields=("user", "skill_name"), name="unique_user_skill"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} - {self.skill_name} ({self.progress_percentage}%)"


class LearningRoadmap(models.Model):
    mentor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="authored_roadmaps",
    )
    candidate = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="learning_roadmaps",
    )
    mentorship_request = models.ForeignKey(
        MentorshipRequest,
        on_delete=models.CASCADE,
        related_name="roadmaps",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    skills = models.JSONField(default=list, blank=True)
    milestones = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, null=True, blank=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return self.title

    @property
    def total_estimated_hours(self):
        total = 0
        for milestone in self.milestones or []:
            try:
                total += float(milestone.get("estimatedHours") or 0)
            except (TypeError, ValueError, AttributeError):
                continue
        return total


class MilestoneComment(models.Model):
    roadmap = models.ForeignKey(
        LearningRoadmap,
        on_delete=models.CASCADE,
        related_name="milestone_comments",
    )
    milestone_id = models.CharField(max_length=64)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="milestone_comments",
    )
    comment = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")
        indexes = [models.Index(fields=("roadmap", "milestone_id"), name="milestone_comment_lookup")]

    def __str__(self) -> str:
        return f"Comment #{self.id} on roadmap {self.roadmap_id} ({self.milestone_id})"
