import csv
from pathlib import Path

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from quizbank.sysutils.constants import UserRole

FIELDNAMES = [
    "id",
    "email",
    "name",
    "role",
    "is_active",
    "is_staff",
    "is_superuser",
    "created_at",
]


def _row(user):
    return [
        str(user.id),
        user.email,
        user.name,
        user.role,
        user.is_active,
        user.is_staff,
        user.is_superuser,
        user.created_at.isoformat() if user.created_at else "",
    ]


class Command(BaseCommand):
    help = "Export all admin accounts (role=admin) to a CSV file."

    def add_arguments(self, parser):
        parser.add_argument(
            "output",
            nargs="?",
            default="admins.csv",
            help=(
                "Output CSV file path. Defaults to 'admins.csv' in the "
                "current directory. Use '-' to write to stdout."
            ),
        )

    def handle(self, *args, **options):
        output = options["output"]
        User = get_user_model()

        admins_qs = User.objects.filter(role=UserRole.ADMIN.value).order_by("created_at")

        if not admins_qs.exists():
            self.stdout.write(self.style.WARNING("No admin accounts found (role=admin)."))
            return

        if output == "-":
            writer = csv.writer(self.stdout)
            writer.writerow(FIELDNAMES)
            for user in admins_qs:
                writer.writerow(_row(user))
            return

        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with output_path.open("w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow(FIELDNAMES)
            for user in admins_qs:
                writer.writerow(_row(user))

        self.stdout.write(
            self.style.SUCCESS(f"Exported {admins_qs.count()} admin account(s) to '{output_path}'.")
        )
