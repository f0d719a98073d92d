"""
Slug and tag-string helpers.

Slugs are ASCII only: anything outside ``[a-z0-9]`` after lowercasing is a
separator. This differs from ``django.utils.text.slugify``, which keeps
underscores and transliterates accents.
"""
import re

_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def slugify(text):
    """
    Return a URL-safe slug for ``text``.

    >>> slugify("Big News Today!!!")
    'big-news-today'

    Idempotent: ``slugify(slugify(x)) == slugify(x)``.
    """
    return _SEPARATOR_RE.sub("-", text.lower()).strip("-")


def parse_tag_names(raw):
    """
    Split a comma-separated tag string into distinct tag names.

    Entries are trimmed and empty ones dropped. Names that share a slug
    collapse to the first spelling, so "Tech, tech, TECH" gives ["Tech"].
    Names with no slug-able characters are dropped.

    Returns:
        list of (name, slug) tuples in submission order
    """
    seen = set()
    result = []
    for name in (part.strip() for part in (raw or "").split(",")):
        if not name:
            continue
        slug = slugify(name)
        if not slug or slug in seen:
            continue
        seen.add(slug)
        result.append((name, slug))
    return result


def truncate(text, length, suffix=""):
    """Cut ``text`` to ``length`` characters, appending ``suffix`` if cut."""
    if len(text) > length:
        return text[:length] + suffix
    return text
