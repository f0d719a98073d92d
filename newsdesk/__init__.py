"""
django-newsdesk - A small Django news desk.

Features:
- Posts with a featured image and comma-separated tags
- Transactional post/tag synchronization
- Owner-or-admin editing with role records
- Admin dashboard for moderating posts and listing users
- SEO metadata for post pages
"""

__version__ = "0.1.0"
