"""
Shared fixtures for django-newsdesk tests.
"""
import pytest

from newsdesk.auth import AuthContext
from newsdesk.models import Post, UserRole

from .factories import BODY, make_user


@pytest.fixture
def author(db):
    """The user who writes posts."""
    return make_user("author@example.com", "Alice Author")


@pytest.fixture
def other_user(db):
    """A signed-up user who owns nothing."""
    return make_user("other@example.com", "Oscar Other")


@pytest.fixture
def editor(db):
    """A user holding the admin role."""
    user = make_user("editor@example.com", "Eve Editor")
    UserRole.objects.create(user=user, role=UserRole.ADMIN)
    return user


@pytest.fixture
def author_auth(author):
    return AuthContext.for_user(author)


@pytest.fixture
def editor_auth(editor):
    return AuthContext.for_user(editor)


@pytest.fixture
def post(author):
    """A post owned by ``author``."""
    return Post.objects.create(
        author=author,
        title="Big News Today!!!",
        content=BODY,
    )


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path
