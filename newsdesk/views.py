"""
Views for django-newsdesk.
"""
import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View
from django.views.generic import DetailView, FormView, ListView, TemplateView

from .auth import can_edit, get_auth_context
from .conf import newsdesk_settings
from .exceptions import NewsdeskError, PostNotFound
from .forms import PostForm, SignInForm, SignUpForm, first_error, first_message
from .models import Post, Profile, Tag
from .publishing import delete_post, get_post, save_post
from .seo import post_metadata

logger = logging.getLogger(__name__)

HOME_URL = reverse_lazy("newsdesk:home")
SIGN_IN_URL = reverse_lazy("newsdesk:sign_in")


class NewsdeskLoginRequiredMixin(LoginRequiredMixin):
    """Send anonymous visitors to the newsdesk sign-in page."""

    login_url = SIGN_IN_URL


class HomeView(ListView):
    """All posts, newest first, optionally filtered by tag slug."""

    model = Post
    template_name = "newsdesk/home.html"
    context_object_name = "posts"

    def get_queryset(self):
        qs = Post.objects.select_related(
            "author", "author__news_profile"
        ).prefetch_related("tags")

        tag_slug = self.request.GET.get("tag")
        if tag_slug:
            qs = qs.filter(tags__slug=tag_slug).distinct()
        return qs

    def get(self, request, *args, **kwargs):
        self.object_list = self._get_posts()
        context = self.get_context_data()
        return self.render_to_response(context)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tags"] = self._get_tags()
        context["selected_tag"] = self.request.GET.get("tag")
        return context

    def _get_posts(self):
        try:
            return list(self.get_queryset())
        except DatabaseError as e:
            logger.exception("Error fetching posts")
            messages.error(self.request, str(e))
            return []

    def _get_tags(self):
        # The tag cloud is optional; a failed fetch leaves it empty.
        try:
            return list(Tag.objects.all()[:newsdesk_settings.TAG_CLOUD_SIZE])
        except DatabaseError:
            logger.exception("Error fetching tags")
            return []


class PostDetailView(DetailView):
    """Display a single post with its tags and SEO metadata."""

    model = Post
    template_name = "newsdesk/post_detail.html"
    context_object_name = "post"

    def get(self, request, *args, **kwargs):
        try:
            self.object = get_post(self.kwargs["slug"])
            self.tags = list(self.object.tags.all())
        except PostNotFound as e:
            messages.error(request, str(e))
            return redirect(HOME_URL)
        except DatabaseError as e:
            logger.exception("Error fetching post %s", self.kwargs["slug"])
            messages.error(request, str(e))
            return redirect(HOME_URL)
        context = self.get_context_data(object=self.object)
        return self.render_to_response(context)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tags"] = self.tags
        auth = get_auth_context(self.request)
        context["can_edit"] = can_edit(auth, self.object)
        context["seo"] = post_metadata(self.request, self.object)
        return context


class PostFormMixin(NewsdeskLoginRequiredMixin):
    """Shared form handling for creating and editing posts."""

    form_class = PostForm
    template_name = "newsdesk/post_form.html"
    object = None

    def form_valid(self, form):
        auth = get_auth_context(self.request)
        try:
            post = save_post(
                auth,
                title=form.cleaned_data["title"],
                content=form.cleaned_data["content"],
                tags=form.cleaned_data["tags"],
                image=form.cleaned_data.get("featured_image"),
                slug=self.object.slug if self.object else None,
            )
        except ValidationError as e:
            messages.error(self.request, first_message(e))
            return self.render_to_response(self.get_context_data(form=form))
        except PermissionDenied as e:
            messages.error(self.request, str(e))
            return redirect(HOME_URL)
        except NewsdeskError as e:
            messages.error(self.request, str(e))
            return self.render_to_response(self.get_context_data(form=form))

        if self.object:
            messages.success(self.request, "Post updated successfully")
        else:
            messages.success(self.request, "Post created successfully")
        return redirect(post.get_absolute_url())

    def form_invalid(self, form):
        messages.error(self.request, first_error(form))
        return super().form_invalid(form)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["post"] = self.object
        context["existing_image_url"] = self.object.featured_image_url if self.object else None
        return context


class PostCreateView(PostFormMixin, FormView):
    """Create a new post."""


class PostUpdateView(PostFormMixin, FormView):
    """Edit an existing post. Owner or admin only."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        try:
            self.object = get_post(kwargs["slug"])
        except PostNotFound as e:
            messages.error(request, str(e))
            return redirect(HOME_URL)

        if not can_edit(get_auth_context(request), self.object):
            messages.error(request, "You can only edit your own posts")
            return redirect(self.object.get_absolute_url())

        return super().dispatch(request, *args, **kwargs)

    def get_initial(self):
        return {
            "title": self.object.title,
            "content": self.object.content,
            "tags": self.object.tag_names,
        }


class PostDeleteView(NewsdeskLoginRequiredMixin, View):
    """Delete a post. Owner or admin only."""

    http_method_names = ["post"]

    def post(self, request, slug):
        try:
            post = get_post(slug)
        except PostNotFound as e:
            messages.error(request, str(e))
            return redirect(HOME_URL)

        try:
            delete_post(get_auth_context(request), post)
        except (PermissionDenied, NewsdeskError) as e:
            messages.error(request, str(e))
            return redirect(post.get_absolute_url())

        messages.success(request, "Post deleted successfully")
        return redirect(self._get_success_url())

    def _get_success_url(self):
        next_url = self.request.POST.get("next")
        if next_url and url_has_allowed_host_and_scheme(
            next_url,
            allowed_hosts={self.request.get_host()},
            require_https=self.request.is_secure(),
        ):
            return next_url
        return HOME_URL


class AdminDashboardView(NewsdeskLoginRequiredMixin, TemplateView):
    """All posts and all users. Admin role required."""

    template_name = "newsdesk/admin_dashboard.html"

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if not get_auth_context(request).is_admin:
            logger.warning("User %s denied admin dashboard", request.user.pk)
            messages.error(request, "Access Denied: you don't have admin privileges")
            return redirect(HOME_URL)

        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["posts"] = self._get_posts()
        context["profiles"] = self._get_profiles()
        return context

    def _get_posts(self):
        try:
            return list(
                Post.objects.select_related("author", "author__news_profile")
                .order_by("-created_at", "-id")
            )
        except DatabaseError as e:
            logger.exception("Error fetching posts")
            messages.error(self.request, str(e))
            return []

    def _get_profiles(self):
        try:
            return list(Profile.objects.order_by("-created_at"))
        except DatabaseError:
            logger.exception("Error fetching profiles")
            return []


class RedirectAuthenticatedMixin:
    """Signed-in visitors have no business on the auth pages."""

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            return redirect(HOME_URL)
        return super().dispatch(request, *args, **kwargs)


class SignInView(RedirectAuthenticatedMixin, FormView):
    """E-mail and password sign-in."""

    form_class = SignInForm
    template_name = "newsdesk/auth/sign_in.html"

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["request"] = self.request
        return kwargs

    def form_valid(self, form):
        login(self.request, form.user)
        return redirect(self._get_success_url())

    def form_invalid(self, form):
        messages.error(self.request, first_error(form))
        return super().form_invalid(form)

    def _get_success_url(self):
        next_url = self.request.POST.get("next") or self.request.GET.get("next")
        if next_url and url_has_allowed_host_and_scheme(
            next_url,
            allowed_hosts={self.request.get_host()},
            require_https=self.request.is_secure(),
        ):
            return next_url
        return HOME_URL


class SignUpView(RedirectAuthenticatedMixin, FormView):
    """Create an account, then send the visitor to sign in."""

    form_class = SignUpForm
    template_name = "newsdesk/auth/sign_up.html"
    success_url = SIGN_IN_URL

    def form_valid(self, form):
        try:
            user = form.save()
        except DatabaseError as e:
            logger.exception("Sign-up failed")
            messages.error(self.request, str(e))
            return self.form_invalid(form)

        logger.info("Created account for user %s", user.pk)
        messages.success(
            self.request, "Account created successfully. You can now log in."
        )
        return super().form_valid(form)

    def form_invalid(self, form):
        if form.errors:
            messages.error(self.request, first_error(form))
        return super().form_invalid(form)


class SignOutView(View):
    """Sign out and return to the sign-in page."""

    http_method_names = ["post"]

    def post(self, request):
        logout(request)
        return redirect(reverse("newsdesk:sign_in"))
