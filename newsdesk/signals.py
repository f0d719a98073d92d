"""
Signal handlers for newsdesk.
"""
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile(sender, instance, created, **kwargs):
    """Create the public profile when a user signs up."""
    if not created:
        return
    Profile.objects.get_or_create(
        user=instance,
        defaults={
            "email": instance.email,
            "full_name": instance.get_full_name(),
        },
    )
