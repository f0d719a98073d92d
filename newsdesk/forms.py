"""
Forms for django-newsdesk.

Bounds come from ``newsdesk_settings`` and are applied when the form is
built, so ``NEWSDESK`` overrides take effect without a restart.
"""
from django import forms
from django.contrib.auth import authenticate, get_user_model
from django.core import validators
from django.core.exceptions import ValidationError

from .conf import newsdesk_settings
from .text import slugify


def first_error(form):
    """Return the first validation message of a bound, invalid form."""
    for field in list(form.fields) + ["__all__"]:
        errors = form.errors.get(field)
        if errors:
            return errors[0]
    return ""


def first_message(exc):
    """Return the first message carried by a ValidationError."""
    messages = exc.messages
    return messages[0] if messages else str(exc)


class PostForm(forms.Form):
    """Title, content, comma-separated tags and an optional featured image."""

    title = forms.CharField(strip=True)
    content = forms.CharField(widget=forms.Textarea(attrs={"rows": 15}), strip=False)
    tags = forms.CharField(
        required=False,
        help_text="Comma-separated, e.g. technology, news, breaking",
    )
    featured_image = forms.ImageField(required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        s = newsdesk_settings
        self._set_bounds(
            "title", s.TITLE_MIN_LENGTH, s.TITLE_MAX_LENGTH, "Title",
        )
        self._set_bounds(
            "content", s.CONTENT_MIN_LENGTH, s.CONTENT_MAX_LENGTH, "Content",
        )
        self._set_bounds("tags", None, s.TAGS_MAX_LENGTH, "Tags")

    def _set_bounds(self, name, min_length, max_length, label):
        field = self.fields[name]
        field.error_messages["required"] = f"{label} is required"
        if min_length is not None:
            field.min_length = min_length
            field.validators.append(
                validators.MinLengthValidator(
                    min_length,
                    message=f"{label} must be at least {min_length} characters",
                )
            )
        field.max_length = max_length
        field.validators.append(
            validators.MaxLengthValidator(
                max_length,
                message=f"{label} must be less than {max_length} characters",
            )
        )

    def clean_title(self):
        title = self.cleaned_data["title"]
        if not slugify(title):
            raise ValidationError("Title must contain letters or digits")
        return title

    def clean_tags(self):
        return self.cleaned_data.get("tags") or ""

    def clean_featured_image(self):
        image = self.cleaned_data.get("featured_image")
        if not image:
            return None

        content_type = getattr(image, "content_type", "")
        if content_type and content_type not in newsdesk_settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError("Unsupported image type")

        max_bytes = newsdesk_settings.IMAGE_MAX_SIZE_MB * 1024 * 1024
        if image.size > max_bytes:
            raise ValidationError(
                f"Image must be smaller than {newsdesk_settings.IMAGE_MAX_SIZE_MB} MB"
            )
        return image


class SignInForm(forms.Form):
    """E-mail and password sign-in."""

    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    password = forms.CharField(
        widget=forms.PasswordInput,
        min_length=6,
        strip=False,
        error_messages={"min_length": "Password must be at least 6 characters"},
    )

    def __init__(self, *args, request=None, **kwargs):
        self.request = request
        self.user = None
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        email = cleaned_data.get("email")
        password = cleaned_data.get("password")
        if email and password:
            self.user = _authenticate_by_email(self.request, email, password)
            if self.user is None:
                raise ValidationError("Invalid login credentials")
        return cleaned_data


class SignUpForm(forms.Form):
    """Account creation with a display name."""

    full_name = forms.CharField(
        min_length=2,
        max_length=150,
        error_messages={"min_length": "Name must be at least 2 characters"},
    )
    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    password = forms.CharField(
        widget=forms.PasswordInput,
        min_length=6,
        strip=False,
        error_messages={"min_length": "Password must be at least 6 characters"},
    )

    def clean_email(self):
        email = self.cleaned_data["email"].lower()
        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError("User already registered")
        return email

    def save(self):
        """Create the user; the profile follows from the post_save signal."""
        User = get_user_model()
        return User.objects.create_user(
            username=self.cleaned_data["email"],
            email=self.cleaned_data["email"],
            password=self.cleaned_data["password"],
            first_name=self.cleaned_data["full_name"],
        )


def _authenticate_by_email(request, email, password):
    User = get_user_model()
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        return None
    return authenticate(request, username=user.get_username(), password=password)
