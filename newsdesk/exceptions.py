"""
Exceptions raised by newsdesk services.

Form validation uses ``django.core.exceptions.ValidationError`` and
permission failures use ``PermissionDenied``; these cover the rest.
"""


class NewsdeskError(Exception):
    """Base class for newsdesk errors."""


class PostNotFound(NewsdeskError):
    """No post matches the requested slug."""

    def __init__(self, slug):
        self.slug = slug
        super().__init__("Post not found")


class PostSaveError(NewsdeskError):
    """The backend rejected a write while saving a post."""


class SlugConflict(PostSaveError):
    """Another post already uses this slug."""

    def __init__(self, slug):
        self.slug = slug
        super().__init__(f'A post with the slug "{slug}" already exists')
