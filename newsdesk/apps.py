"""Django app configuration for newsdesk."""
from django.apps import AppConfig


class NewsdeskConfig(AppConfig):
    """Configuration for the newsdesk app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "newsdesk"
    verbose_name = "Newsdesk"

    def ready(self):
        """Connect profile signals."""
        from . import signals  # noqa: F401
