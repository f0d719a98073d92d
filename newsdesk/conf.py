"""
Configuration settings for django-newsdesk.

Override these in your Django settings.py:

    NEWSDESK = {
        'SITE_NAME': 'BreakingNewsDaily',
        'TITLE_MIN_LENGTH': 5,
        'CLEAR_TAGS_ON_EMPTY': False,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    "SITE_NAME": "BreakingNewsDaily",

    # Post form bounds
    "TITLE_MIN_LENGTH": 5,
    "TITLE_MAX_LENGTH": 200,
    "CONTENT_MIN_LENGTH": 50,
    "CONTENT_MAX_LENGTH": 50000,
    "TAGS_MAX_LENGTH": 200,

    # Display
    "EXCERPT_LENGTH": 150,
    "META_DESCRIPTION_LENGTH": 160,
    "PLACEHOLDER_IMAGE": "/static/newsdesk/placeholder.svg",
    "TAG_CLOUD_SIZE": 50,

    # Featured images, stored as <IMAGE_UPLOAD_PATH>/<owner id>/<name>
    "IMAGE_UPLOAD_PATH": "post-images",
    "IMAGE_MAX_SIZE_MB": 5,
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png", "image/gif", "image/webp"],

    # Roles
    "ADMIN_ROLE": "admin",

    # An empty tag string leaves existing associations alone unless set
    "CLEAR_TAGS_ON_EMPTY": False,
}


class NewsdeskSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from newsdesk.conf import newsdesk_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid newsdesk setting: {name}")

        user_settings = getattr(settings, "NEWSDESK", {})
        return user_settings.get(name, DEFAULTS[name])


newsdesk_settings = NewsdeskSettings()
