"""
Tests for saving posts together with their tags.
"""
import pytest
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError, IntegrityError
from django.db.models.query import QuerySet

from newsdesk import publishing
from newsdesk.auth import AuthContext
from newsdesk.exceptions import PostNotFound, PostSaveError, SlugConflict
from newsdesk.models import Post, PostTag, Tag
from newsdesk.publishing import delete_post, replace_post_tags, save_post

from .factories import BODY, make_image


def linked_slugs(post):
    return set(PostTag.objects.filter(post=post).values_list("tag__slug", flat=True))


@pytest.fixture
def tagged_post(post):
    """``post`` labelled with "old-news" and "local"."""
    for name in ["Old News", "Local"]:
        PostTag.objects.create(post=post, tag=Tag.objects.create(name=name))
    return post


class TestCreate:
    """Creating new posts."""

    def test_slug_from_title(self, author_auth):
        post = save_post(author_auth, title="Big News Today!!!", content=BODY)
        assert post.slug == "big-news-today"
        assert post.author == author_auth.user
        assert post.featured_image_url is None

    def test_tags_created(self, author_auth):
        post = save_post(
            author_auth, title="Election night", content=BODY, tags="politics, world",
        )
        assert linked_slugs(post) == {"politics", "world"}
        assert Tag.objects.count() == 2

    def test_existing_tag_reused(self, author_auth):
        existing = Tag.objects.create(name="Politics")
        post = save_post(
            author_auth, title="Election night", content=BODY, tags="politics",
        )
        assert list(post.tags.all()) == [existing]
        assert Tag.objects.count() == 1

    def test_tag_inserted_concurrently_is_reused(self, author_auth, monkeypatch):
        # Another writer creates the tag between our lookup and our insert.
        original_get = QuerySet.get
        raced = []

        def stale_get(qs, *args, **kwargs):
            if qs.model is Tag and not raced:
                raced.append(True)
                Tag.objects.create(name="Politics", slug="politics")
                raise Tag.DoesNotExist
            return original_get(qs, *args, **kwargs)

        monkeypatch.setattr(QuerySet, "get", stale_get)
        post = save_post(
            author_auth, title="Election night", content=BODY, tags="politics",
        )
        assert raced
        assert Tag.objects.count() == 1
        assert [tag.name for tag in post.tags.all()] == ["Politics"]

    def test_case_variants_give_one_association(self, author_auth):
        post = save_post(
            author_auth, title="Gadget roundup", content=BODY, tags="Tech, tech, TECH",
        )
        assert PostTag.objects.filter(post=post).count() == 1
        assert Tag.objects.get().name == "Tech"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("a, b, c", {"a", "b", "c"}),
            (" Breaking News ,breaking-news, sport", {"breaking-news", "sport"}),
            (",,, weather ,", {"weather"}),
            ("?!, ok", {"ok"}),
        ],
    )
    def test_links_equal_distinct_parsed_slugs(self, author_auth, raw, expected):
        post = save_post(author_auth, title="Tag sets", content=BODY, tags=raw)
        assert linked_slugs(post) == expected

    def test_duplicate_title_conflicts(self, author_auth, post):
        with pytest.raises(SlugConflict):
            save_post(author_auth, title="big news today", content=BODY, tags="x")
        assert Post.objects.count() == 1
        assert not Tag.objects.exists()

    def test_anonymous_refused(self, db):
        with pytest.raises(PermissionDenied):
            save_post(AuthContext.anonymous(), title="Big News", content=BODY)
        assert not Post.objects.exists()


class TestValidation:
    """Input bounds are checked before any write."""

    @pytest.mark.parametrize(
        "fields, message",
        [
            ({"title": "Hey"}, "Title must be at least 5 characters"),
            ({"title": "T" * 201}, "Title must be less than 200 characters"),
            ({"content": "too short"}, "Content must be at least 50 characters"),
            ({"content": "c" * 50001}, "Content must be less than 50000 characters"),
            ({"tags": "t" * 201}, "Tags must be less than 200 characters"),
            ({"title": "!!!!!!"}, "Title must contain letters or digits"),
        ],
    )
    def test_rejected(self, author_auth, fields, message):
        kwargs = {"title": "Valid title", "content": BODY, "tags": "news"}
        kwargs.update(fields)
        with pytest.raises(ValidationError) as excinfo:
            save_post(author_auth, **kwargs)
        assert excinfo.value.messages == [message]
        assert not Post.objects.exists()
        assert not Tag.objects.exists()

    def test_first_violation_reported(self, author_auth):
        with pytest.raises(ValidationError) as excinfo:
            save_post(author_auth, title="Hey", content="short")
        assert excinfo.value.messages == ["Title must be at least 5 characters"]

    def test_validation_precedes_upload(self, author_auth, monkeypatch):
        def fail_upload(*args):
            raise AssertionError("upload attempted")

        monkeypatch.setattr(publishing, "upload_featured_image", fail_upload)
        with pytest.raises(ValidationError):
            save_post(author_auth, title="Hey", content=BODY, image=make_image())


class TestUpdate:
    """Editing existing posts by slug."""

    def test_replaces_associations(self, author_auth, tagged_post):
        post = save_post(
            author_auth,
            title="Big News Today (updated)",
            content=BODY,
            tags="politics, world",
            slug="big-news-today",
        )
        assert post.pk == tagged_post.pk
        assert post.slug == "big-news-today"
        assert post.title == "Big News Today (updated)"
        assert linked_slugs(post) == {"politics", "world"}
        # new tags were created; old ones remain in the tag table
        assert set(Tag.objects.values_list("slug", flat=True)) == {
            "old-news", "local", "politics", "world",
        }

    def test_empty_tags_keep_associations(self, author_auth, tagged_post):
        save_post(
            author_auth, title="Big News Today", content=BODY, tags="  ",
            slug=tagged_post.slug,
        )
        assert linked_slugs(tagged_post) == {"old-news", "local"}

    def test_empty_tags_clear_when_configured(self, author_auth, tagged_post, settings):
        settings.NEWSDESK = {"CLEAR_TAGS_ON_EMPTY": True}
        save_post(
            author_auth, title="Big News Today", content=BODY, tags="",
            slug=tagged_post.slug,
        )
        assert linked_slugs(tagged_post) == set()

    def test_admin_edit_keeps_owner(self, editor_auth, author, post):
        updated = save_post(
            editor_auth, title="Moderated title", content=BODY, slug=post.slug,
        )
        assert updated.author == author

    def test_other_user_refused(self, other_user, tagged_post):
        with pytest.raises(PermissionDenied):
            save_post(
                AuthContext.for_user(other_user),
                title="Hijacked",
                content=BODY,
                tags="spam",
                slug=tagged_post.slug,
            )
        tagged_post.refresh_from_db()
        assert tagged_post.title == "Big News Today!!!"
        assert linked_slugs(tagged_post) == {"old-news", "local"}

    def test_unknown_slug(self, author_auth):
        with pytest.raises(PostNotFound):
            save_post(author_auth, title="Ghost post", content=BODY, slug="missing")


class TestAtomicity:
    """A failure part way through leaves no partial state behind."""

    @pytest.fixture
    def failing_second_tag(self, monkeypatch):
        calls = []
        original = publishing.resolve_tag

        def resolve(name, slug):
            calls.append(slug)
            if len(calls) == 2:
                raise DatabaseError("tag insert failed")
            return original(name, slug)

        monkeypatch.setattr(publishing, "resolve_tag", resolve)
        return calls

    def test_update_rolled_back(self, author_auth, tagged_post, failing_second_tag):
        with pytest.raises(PostSaveError, match="tag insert failed"):
            save_post(
                author_auth,
                title="Half written",
                content=BODY,
                tags="politics, world",
                slug=tagged_post.slug,
            )
        tagged_post.refresh_from_db()
        assert tagged_post.title == "Big News Today!!!"
        assert linked_slugs(tagged_post) == {"old-news", "local"}
        assert not Tag.objects.filter(slug="politics").exists()

    def test_create_rolled_back(self, author_auth, failing_second_tag):
        with pytest.raises(PostSaveError):
            save_post(author_auth, title="Never saved", content=BODY, tags="a, b")
        assert not Post.objects.exists()
        assert not Tag.objects.exists()

    def test_uploaded_image_discarded(self, author_auth, media_root, failing_second_tag):
        with pytest.raises(PostSaveError):
            save_post(
                author_auth, title="Never saved", content=BODY, tags="a, b",
                image=make_image(),
            )
        owner_dir = media_root / "post-images" / str(author_auth.user_id)
        assert not owner_dir.exists() or not any(owner_dir.iterdir())

    def test_other_integrity_errors_are_not_slug_conflicts(self, author_auth, monkeypatch):
        def rejected_save(self, *args, **kwargs):
            raise IntegrityError("NOT NULL constraint failed: newsdesk_post.author_id")

        monkeypatch.setattr(Post, "save", rejected_save)
        with pytest.raises(PostSaveError, match="NOT NULL constraint failed") as excinfo:
            save_post(author_auth, title="Never saved", content=BODY, tags="a")
        assert not isinstance(excinfo.value, SlugConflict)
        assert not Tag.objects.exists()


class TestFeaturedImage:
    """Featured image upload."""

    def test_uploaded_under_owner_path(self, author_auth, media_root):
        post = save_post(
            author_auth, title="Photo story", content=BODY, image=make_image("Shot.PNG"),
        )
        prefix = f"/media/post-images/{author_auth.user_id}/"
        assert post.featured_image_url.startswith(prefix)
        assert post.featured_image_url.endswith(".png")
        stored = media_root / post.featured_image_url[len("/media/"):]
        assert stored.exists()

    def test_existing_image_kept_on_edit(self, author_auth, post):
        post.featured_image_url = "/media/post-images/1/old.png"
        post.save()
        updated = save_post(author_auth, title="Retitled", content=BODY, slug=post.slug)
        assert updated.featured_image_url == "/media/post-images/1/old.png"

    def test_upload_failure_aborts(self, author_auth, monkeypatch):
        def fail_upload(owner, image):
            raise OSError("bucket unavailable")

        monkeypatch.setattr(publishing, "upload_featured_image", fail_upload)
        with pytest.raises(PostSaveError, match="bucket unavailable"):
            save_post(
                author_auth, title="Photo story", content=BODY, tags="news",
                image=make_image(),
            )
        assert not Post.objects.exists()
        assert not Tag.objects.exists()


class TestReplacePostTags:
    """Direct tests for replace_post_tags."""

    def test_returns_linked_tags(self, post):
        tags = replace_post_tags(post, "One, Two")
        assert [tag.slug for tag in tags] == ["one", "two"]


class TestDelete:
    """Deleting posts."""

    def test_owner_deletes(self, author_auth, post):
        delete_post(author_auth, post)
        assert not Post.objects.exists()

    def test_admin_deletes(self, editor_auth, post):
        delete_post(editor_auth, post)
        assert not Post.objects.exists()

    def test_other_user_refused(self, other_user, post):
        with pytest.raises(PermissionDenied):
            delete_post(AuthContext.for_user(other_user), post)
        assert Post.objects.exists()
