"""
URL configuration for django-newsdesk.

Include in your project urls.py:

    path('', include('newsdesk.urls')),
"""
from django.urls import path

from . import views

app_name = "newsdesk"

urlpatterns = [
    # Posts
    path("", views.HomeView.as_view(), name="home"),
    path("posts/<slug:slug>/", views.PostDetailView.as_view(), name="post_detail"),
    path("posts/<slug:slug>/delete/", views.PostDeleteView.as_view(), name="post_delete"),

    # Post management
    path("create/", views.PostCreateView.as_view(), name="post_create"),
    path("edit/<slug:slug>/", views.PostUpdateView.as_view(), name="post_update"),

    # Moderation
    path("admin-panel/", views.AdminDashboardView.as_view(), name="admin_dashboard"),

    # Accounts
    path("auth/", views.SignInView.as_view(), name="sign_in"),
    path("auth/sign-up/", views.SignUpView.as_view(), name="sign_up"),
    path("auth/sign-out/", views.SignOutView.as_view(), name="sign_out"),
]
