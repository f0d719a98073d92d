"""
Grant or revoke a newsdesk role.

    python manage.py newsdesk_role editor@example.com
    python manage.py newsdesk_role editor@example.com --revoke
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from ...auth import grant_role, revoke_role
from ...models import UserRole


class Command(BaseCommand):
    help = "Grant (or with --revoke, remove) a role for the user with this e-mail."

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument(
            "--role",
            default=UserRole.ADMIN,
            choices=[choice for choice, _ in UserRole.ROLE_CHOICES],
        )
        parser.add_argument("--revoke", action="store_true")

    def handle(self, *args, **options):
        User = get_user_model()
        user = User.objects.filter(email__iexact=options["email"]).first()
        if user is None:
            raise CommandError(f"No user with email {options['email']}")

        role = options["role"]
        if options["revoke"]:
            changed = revoke_role(user, role)
            verb = "Revoked" if changed else "User did not hold"
        else:
            changed = grant_role(user, role)
            verb = "Granted" if changed else "User already holds"
        self.stdout.write(f"{verb} role {role} ({user.email})")
