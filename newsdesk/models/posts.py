"""
Post, Tag, and PostTag models for django-newsdesk.
"""
from django.conf import settings
from django.db import models
from django.urls import reverse

from ..conf import newsdesk_settings
from ..text import slugify, truncate


class Tag(models.Model):
    """
    Flat tag for posts.

    Tags are created lazily the first time a post names them and are
    never deleted by post saves.
    """

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("newsdesk:home") + f"?tag={self.slug}"

    @property
    def post_count(self):
        """Return count of posts with this tag."""
        return self.post_tags.count()


class Post(models.Model):
    """
    News post.

    The slug is derived from the title when the post is first created and
    stays fixed on later edits.
    """

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="news_posts",
    )
    title = models.CharField(max_length=200)
    content = models.TextField()
    slug = models.SlugField(max_length=255, unique=True)
    featured_image_url = models.CharField(max_length=500, null=True, blank=True)

    tags = models.ManyToManyField(
        Tag,
        through="PostTag",
        related_name="posts",
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["author", "-created_at"],
                name="newsdesk_post_author_created",
            ),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug and self.title:
            self.slug = slugify(self.title)
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("newsdesk:post_detail", kwargs={"slug": self.slug})

    @property
    def excerpt(self):
        """Return truncated content for list display."""
        return truncate(self.content, newsdesk_settings.EXCERPT_LENGTH, "...")

    @property
    def meta_description(self):
        """Return the content prefix used for search and social previews."""
        return truncate(self.content, newsdesk_settings.META_DESCRIPTION_LENGTH)

    @property
    def tag_names(self):
        """Return tag names as the comma-separated string the edit form uses."""
        return ", ".join(tag.name for tag in self.tags.all())

    @property
    def paragraphs(self):
        return self.content.split("\n")


class PostTag(models.Model):
    """
    Junction table linking posts to tags.

    Rows for a post are replaced wholesale each time the post is saved
    with a non-empty tag string.
    """

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="post_tags",
    )
    tag = models.ForeignKey(
        Tag,
        on_delete=models.CASCADE,
        related_name="post_tags",
    )

    class Meta:
        verbose_name = "Post Tag"
        verbose_name_plural = "Post Tags"
        unique_together = ["post", "tag"]

    def __str__(self):
        return f"{self.post} - {self.tag}"
