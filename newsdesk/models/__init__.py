"""
Models for django-newsdesk.

All models are importable from newsdesk.models:

    from newsdesk.models import Post, Tag, PostTag, Profile, UserRole
"""
from .posts import Tag, Post, PostTag
from .accounts import Profile, UserRole

__all__ = [
    # Posts
    "Tag",
    "Post",
    "PostTag",
    # Accounts
    "Profile",
    "UserRole",
]
