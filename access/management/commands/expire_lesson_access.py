from django.core.management.base import BaseCommand
from django.utils import timezone

from access.services import expire_access, expired_grants


class Command(BaseCommand):
    help = "Delete lesson access grants whose expires_at has passed and notify their owners."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the lapsed grants without deleting them.",
        )
        parser.add_argument(
            "--quiet-users",
            action="store_true",
            help="Do not create expiry notifications for the affected users.",
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options["dry_run"]:
            lapsed = expired_grants(now).select_related("user", "lesson")
            count = 0
            for grant in lapsed:
                count += 1
                self.stdout.write(
                    f"{grant.user.email}\t{grant.lesson.title}\texpired {grant.expires_at.isoformat()}"
                )
            self.stdout.write(self.style.WARNING(f"Dry run: {count} grant(s) would be removed."))
            return

        removed = expire_access(now, notify_users=not options["quiet_users"])
        self.stdout.write(self.style.SUCCESS(f"Removed {len(removed)} expired grant(s)."))
