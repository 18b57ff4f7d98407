from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

from quizbank.sysutils.constants import UserRole


class Command(BaseCommand):
    help = (
        "Create an admin account, or promote an existing account "
        "with the same email to the admin role."
    )

    def add_arguments(self, parser):
        parser.add_argument("email", type=str, help="Email address used to log in.")
        parser.add_argument("--name", type=str, default="Admin", help="Display name. Defaults to 'Admin'.")
        parser.add_argument(
            "--password",
            type=str,
            default=None,
            help="Password for a newly created account. Required unless the account already exists.",
        )

    def handle(self, *args, **options):
        email = (options["email"] or "").strip().lower()
        name = (options["name"] or "").strip() or "Admin"
        password = options["password"]

        if not email or "@" not in email:
            raise CommandError("A valid email address is required.")

        User = get_user_model()

        existing = User.objects.filter(email__iexact=email).first()
        if existing is not None:
            if existing.role == UserRole.ADMIN.value:
                self.stdout.write(self.style.WARNING(f"{email} is already an admin; nothing to do."))
                return
            existing.role = UserRole.ADMIN.value
            existing.is_staff = True
            existing.save(update_fields=["role", "is_staff", "updated_at"])
            self.stdout.write(self.style.SUCCESS(f"Promoted {email} to admin."))
            return

        if not password:
            raise CommandError("--password is required when creating a new admin.")
        if len(password) < 6:
            raise CommandError("Password must be at least 6 characters.")

        user = User.objects.create_superuser(email=email, name=name, password=password)
        self.stdout.write(self.style.SUCCESS(f"Created admin: {user.email} ({user.name})"))
