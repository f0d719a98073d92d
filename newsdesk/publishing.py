"""
Post saving with tag synchronization.

``save_post`` validates, uploads the featured image, upserts the post and
replaces its tag associations. The post row and every tag write share one
transaction: a failure part way through rolls all of them back, and an
image uploaded for the failed save is removed from storage again.
"""
import logging
import os
import uuid

from django.core.exceptions import PermissionDenied, ValidationError
from django.core.files.storage import default_storage
from django.db import DatabaseError, IntegrityError, transaction

from .auth import can_edit
from .conf import newsdesk_settings
from .exceptions import PostNotFound, PostSaveError, SlugConflict
from .forms import PostForm, first_error
from .models import Post, PostTag, Tag
from .text import parse_tag_names, slugify

logger = logging.getLogger(__name__)


def get_post(slug):
    """
    Load a post with its author profile.

    Tags are left unfetched so a post about to be saved carries no stale
    prefetch cache.

    Raises:
        PostNotFound: if no post has this slug
    """
    try:
        return Post.objects.select_related("author", "author__news_profile").get(slug=slug)
    except Post.DoesNotExist:
        raise PostNotFound(slug) from None


def validate_post_input(title, content, tags="", image=None):
    """
    Check field bounds before anything touches the database or storage.

    Returns:
        cleaned data dict

    Raises:
        ValidationError: with the first violated constraint as message
    """
    files = {"featured_image": image} if image is not None else None
    form = PostForm(
        data={"title": title, "content": content, "tags": tags},
        files=files,
    )
    if not form.is_valid():
        raise ValidationError(first_error(form))
    return form.cleaned_data


def upload_featured_image(owner, image):
    """
    Store ``image`` under a per-owner path.

    Returns:
        (storage name, public URL)
    """
    ext = os.path.splitext(image.name)[1].lower().lstrip(".") or "bin"
    name = f"{newsdesk_settings.IMAGE_UPLOAD_PATH}/{owner.pk}/{uuid.uuid4().hex}.{ext}"
    stored_name = default_storage.save(name, image)
    return stored_name, default_storage.url(stored_name)


def resolve_tag(name, slug):
    """Return the tag with ``slug``, creating it with ``name`` if missing."""
    tag, created = Tag.objects.get_or_create(slug=slug, defaults={"name": name})
    if created:
        logger.info("Created tag %s", slug)
    return tag


def replace_post_tags(post, raw_tags):
    """
    Replace every PostTag row of ``post`` with the tags named in ``raw_tags``.

    Returns:
        list of Tag objects now linked to the post
    """
    PostTag.objects.filter(post=post).delete()
    tags = []
    for name, slug in parse_tag_names(raw_tags):
        tag = resolve_tag(name, slug)
        PostTag.objects.create(post=post, tag=tag)
        tags.append(tag)
    return tags


def save_post(auth, *, title, content, tags="", image=None, slug=None):
    """
    Create or update a post together with its tag associations.

    Args:
        auth: AuthContext of the caller
        title, content: post fields
        tags: raw comma-separated tag string
        image: optional uploaded file for the featured image
        slug: slug of the post to update; None creates a new post

    Returns:
        the saved Post

    Raises:
        ValidationError: input out of bounds, nothing written
        PermissionDenied: anonymous caller, or neither owner nor admin
        PostNotFound: ``slug`` given but no such post
        PostSaveError: storage or database failure, nothing kept
    """
    data = validate_post_input(title, content, tags, image)

    if not auth.is_authenticated:
        raise PermissionDenied("Sign in to publish posts")

    post = None
    if slug:
        post = get_post(slug)
        if not can_edit(auth, post):
            logger.warning("User %s may not edit post %s", auth.user_id, slug)
            raise PermissionDenied("You can only edit your own posts")

    owner = post.author if post is not None else auth.user
    image_name = None
    image_url = post.featured_image_url if post is not None else None
    if data["featured_image"] is not None:
        try:
            image_name, image_url = upload_featured_image(owner, data["featured_image"])
        except OSError as e:
            logger.exception("Featured image upload failed")
            raise PostSaveError(f"Image upload failed: {e}") from e

    try:
        with transaction.atomic():
            post = _upsert_post(post, auth.user, data, image_url)
            if data["tags"].strip():
                replace_post_tags(post, data["tags"])
            elif newsdesk_settings.CLEAR_TAGS_ON_EMPTY:
                PostTag.objects.filter(post=post).delete()
    except PostSaveError:
        _discard_image(image_name)
        raise
    except DatabaseError as e:
        _discard_image(image_name)
        logger.exception("Saving post failed")
        raise PostSaveError(str(e)) from e

    logger.info("%s post %s", "Updated" if slug else "Created", post.slug)
    return post


def _upsert_post(post, author, data, image_url):
    if post is None:
        post_slug = slugify(data["title"])
        if Post.objects.filter(slug=post_slug).exists():
            raise SlugConflict(post_slug)
        post = Post(author=author, slug=post_slug)

    post.title = data["title"]
    post.content = data["content"]
    post.featured_image_url = image_url
    try:
        with transaction.atomic():
            post.save()
    except IntegrityError as e:
        if Post.objects.filter(slug=post.slug).exclude(pk=post.pk).exists():
            raise SlugConflict(post.slug) from e
        logger.exception("Saving post %s failed", post.slug)
        raise PostSaveError(str(e)) from e
    return post


def _discard_image(name):
    if not name:
        return
    try:
        default_storage.delete(name)
    except OSError:
        logger.exception("Could not remove orphaned image %s", name)


def delete_post(auth, post):
    """
    Delete ``post`` if the caller owns it or is an admin.

    Tag associations go with it; tags themselves are kept.
    """
    if not can_edit(auth, post):
        logger.warning("User %s may not delete post %s", auth.user_id, post.slug)
        raise PermissionDenied("You can only delete your own posts")
    try:
        post.delete()
    except DatabaseError as e:
        logger.exception("Deleting post %s failed", post.slug)
        raise PostSaveError(str(e)) from e
    logger.info("Deleted post %s", post.slug)
