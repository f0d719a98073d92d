"""
Django admin configuration for newsdesk.
"""
from django.contrib import admin
from django.db.models import Count

from .models import Post, PostTag, Profile, Tag, UserRole


class PostTagInline(admin.TabularInline):
    """Inline for managing tag associations on posts."""

    model = PostTag
    extra = 1
    raw_id_fields = ["tag"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "post_count", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at"]

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(num_posts=Count("post_tags"))

    def post_count(self, obj):
        """Number of posts carrying the tag."""
        return obj.num_posts

    post_count.short_description = "Posts"
    post_count.admin_order_field = "num_posts"


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ["title_preview", "author", "slug", "created_at", "updated_at"]
    list_filter = ["created_at"]
    search_fields = ["title", "content", "author__email"]
    raw_id_fields = ["author"]
    date_hierarchy = "created_at"
    inlines = [PostTagInline]
    readonly_fields = ["created_at", "updated_at"]
    prepopulated_fields = {"slug": ("title",)}

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "author")
        }),
        ("Media", {
            "fields": ("featured_image_url",)
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["email", "full_name", "created_at"]
    search_fields = ["email", "full_name"]
    readonly_fields = ["created_at"]


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ["user", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__email", "user__username"]
    raw_id_fields = ["user"]
