"""
Template context processors for newsdesk.

Add ``newsdesk.context_processors.newsdesk`` to your TEMPLATES options so
the navigation bar knows who is signed in and whether to show the admin
link.
"""
from .auth import get_auth_context
from .conf import newsdesk_settings


def newsdesk(request):
    return {
        "newsdesk_auth": get_auth_context(request),
        "site_name": newsdesk_settings.SITE_NAME,
    }
