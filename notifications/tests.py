from django.core import mail
from django.db import transaction
from django.test import TestCase, override_settings

from accounts.models import User
from quizbank.sysutils.constants import NotificationType, Priority, UserRole

from .models import Notification
from . import services


class NotificationServiceTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", name="Admin", password="secret1", role=UserRole.ADMIN.value)
		self.user = User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		self.inactive = User.objects.create_user(email="gone@example.com", name="Gone", password="secret1", is_active=False)

	def test_toasts_are_three_most_recent_unread(self):
		for i in range(5):
			services.notify(self.user, NotificationType.REMINDER.value, f"n{i}", "body")
		Notification.objects.filter(title="n4").update(read_status=True)
		toasts = services.toasts_for(self.user)
		self.assertEqual(len(toasts), services.TOAST_LIMIT)
		self.assertNotIn("n4", [t.title for t in toasts])

	def test_mark_all_read(self):
		services.notify(self.user, NotificationType.REMINDER.value, "a", "b")
		services.notify(self.user, NotificationType.REMINDER.value, "c", "d")
		self.assertEqual(services.mark_all_read(self.user), 2)
		self.assertEqual(services.unread_for(self.user).count(), 0)

	def test_broadcast_skips_admins_and_inactive(self):
		created = services.broadcast("Maintenance", "Back soon")
		self.assertEqual([n.user for n in created], [self.user])
		self.assertEqual(Notification.objects.get().type, NotificationType.BROADCAST.value)

	@override_settings(NOTIFY_BY_EMAIL=True, BACKGROUND_TASKS_INLINE=True, DEFAULT_FROM_EMAIL="noreply@example.com")
	def test_high_priority_is_emailed(self):
		with self.captureOnCommitCallbacks(execute=True):
			services.notify(self.user, NotificationType.REMINDER.value, "Urgent", "Read me", priority=Priority.HIGH.value)
			services.notify(self.user, NotificationType.REMINDER.value, "Later", "Whenever")
		self.assertEqual(len(mail.outbox), 1)
		self.assertEqual(mail.outbox[0].to, ["learner@example.com"])

	@override_settings(NOTIFY_BY_EMAIL=True, BACKGROUND_TASKS_INLINE=True, DEFAULT_FROM_EMAIL="noreply@example.com")
	def test_email_waits_for_commit(self):
		with self.captureOnCommitCallbacks(execute=False) as callbacks:
			services.notify(self.user, NotificationType.REMINDER.value, "Urgent", "Read me", priority=Priority.HIGH.value)
		self.assertEqual(len(mail.outbox), 0)
		self.assertEqual(len(callbacks), 1)

	@override_settings(NOTIFY_BY_EMAIL=True, BACKGROUND_TASKS_INLINE=True, DEFAULT_FROM_EMAIL="noreply@example.com")
	def test_no_email_when_transaction_rolls_back(self):
		with self.captureOnCommitCallbacks(execute=True):
			try:
				with transaction.atomic():
					services.notify(self.user, NotificationType.REMINDER.value, "Urgent", "Read me", priority=Priority.HIGH.value)
					raise RuntimeError("abort")
			except RuntimeError:
				pass
		self.assertEqual(len(mail.outbox), 0)
		self.assertFalse(Notification.objects.filter(title="Urgent").exists())

	@override_settings(NOTIFY_BY_EMAIL=False, BACKGROUND_TASKS_INLINE=True, DEFAULT_FROM_EMAIL="noreply@example.com")
	def test_email_disabled(self):
		with self.captureOnCommitCallbacks(execute=True):
			services.notify(self.user, NotificationType.REMINDER.value, "Urgent", "Read me", priority=Priority.HIGH.value)
		self.assertEqual(len(mail.outbox), 0)
