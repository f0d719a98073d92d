"""
Profile and role models for django-newsdesk.
"""
from django.conf import settings
from django.db import models


class Profile(models.Model):
    """
    Public profile for an auth user.

    Created by a post_save signal when the user is created.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="news_profile",
    )
    email = models.EmailField()
    full_name = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        return self.full_name or self.email


class UserRole(models.Model):
    """
    Role granted to a user.

    A user is an admin when a row with role "admin" exists for them.
    """

    ADMIN = "admin"
    USER = "user"
    ROLE_CHOICES = [
        (ADMIN, "Admin"),
        (USER, "User"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="news_roles",
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ["user", "role"]
        verbose_name = "User Role"

    def __str__(self):
        return f"{self.user} ({self.role})"
