"""
Search and social metadata for post pages.
"""
from .conf import newsdesk_settings


def post_metadata(request, post):
    """
    Build the head metadata for a post page.

    Returns a dict with title, description, canonical URL, image URL and
    the Open Graph / Twitter card values derived from them.
    """
    site_name = newsdesk_settings.SITE_NAME
    url = request.build_absolute_uri(post.get_absolute_url())
    image = request.build_absolute_uri(
        post.featured_image_url or newsdesk_settings.PLACEHOLDER_IMAGE
    )
    description = post.meta_description

    return {
        "title": f"{post.title} | {site_name}",
        "description": description,
        "canonical": url,
        "og": {
            "title": post.title,
            "description": description,
            "image": image,
            "url": url,
            "type": "article",
        },
        "twitter": {
            "card": "summary_large_image",
            "title": post.title,
            "description": description,
            "image": image,
        },
    }
