from django.conf import settings
from django.db import models


class UserRole(models.Model):
    ROLE_CANDIDATE = "candidate"
    ROLE_MENTOR = "mentor"
    ROLE_ADMIN = "admin"
    ROLE_SUPER_ADMIN = "super_admin"

    ROLE_CHOICES = [
        (ROLE_CANDIDATE, "Candidate"),
        (ROLE_MENTOR, "Mentor"),
        (ROLE_ADMIN, "Admin"),
        (ROLE_SUPER_ADMIN, "Super Admin"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="roles",
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")
        constraints = [
            models.UniqueConstraint(fields=("user", "role"), name="unique_user_role"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} ({self.role})"
