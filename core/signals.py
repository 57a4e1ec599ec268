import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile_for_new_user(sender, instance, created: bool, **kwargs):
    """Every new account gets a profile row carrying its email."""
    if not created or kwargs.get("raw"):
        return
    try:
        with transaction.atomic():
            Profile.objects.get_or_create(user=instance, defaults={"email": instance.email or ""})
    except DatabaseError:
        logger.warning("Profile creation failed for new user %s", instance.pk, exc_info=True)
