from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from accounts.models import User
from content.models import Subject, SubjectLesson
from notifications.models import Notification
from quizbank.sysutils.constants import RequestStatus, UserRole, NotificationType

from .models import LessonRequest, UserLessonAccess
from . import services
from .services import AccessWorkflowError


class AccessWorkflowTests(TestCase):
	def setUp(self):
		self.admin = User.objects.create_user(email="admin@example.com", name="Admin", password="secret1", role=UserRole.ADMIN.value)
		self.user = User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		self.subject = Subject.objects.create(id="phy", name="Physics")
		self.lesson = SubjectLesson.objects.create(subject=self.subject, title="Motion")

	def test_submit_creates_pending_request(self):
		req = services.submit_request(self.user, self.lesson, "please")
		self.assertEqual(req.status, RequestStatus.PENDING.value)
		self.assertEqual(req.subject_id, "phy")

	def test_duplicate_pending_request_rejected(self):
		services.submit_request(self.user, self.lesson)
		with self.assertRaises(AccessWorkflowError) as ctx:
			services.submit_request(self.user, self.lesson)
		self.assertEqual(ctx.exception.status_code, 409)

	def test_database_allows_one_pending_request_per_lesson(self):
		LessonRequest.objects.create(user=self.user, lesson=self.lesson)
		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				LessonRequest.objects.create(user=self.user, lesson=self.lesson)

	def test_concurrent_duplicate_submission_is_conflict(self):
		services.submit_request(self.user, self.lesson)
		# The pending check misses the other submission's row, the insert does not.
		with mock.patch('django.db.models.query.QuerySet.exists', return_value=False):
			with self.assertRaises(AccessWorkflowError) as ctx:
				services.submit_request(self.user, self.lesson)
		self.assertEqual(ctx.exception.status_code, 409)
		self.assertEqual(LessonRequest.objects.filter(user=self.user).count(), 1)

	def test_admin_cannot_request(self):
		with self.assertRaises(AccessWorkflowError) as ctx:
			services.submit_request(self.admin, self.lesson)
		self.assertEqual(ctx.exception.status_code, 400)

	def test_approve_grants_access_and_notifies(self):
		req = services.submit_request(self.user, self.lesson)
		services.approve_request(req, self.admin, duration_days=7, admin_notes="ok")
		req.refresh_from_db()
		self.assertEqual(req.status, RequestStatus.APPROVED.value)
		self.assertEqual(req.reviewed_by, self.admin)
		self.assertIsNotNone(req.reviewed_at)
		grant = UserLessonAccess.objects.get(user=self.user, lesson=self.lesson)
		self.assertEqual(grant.granted_by, self.admin)
		self.assertEqual(grant.subject_id, "phy")
		self.assertTrue(services.has_active_access(self.user, self.lesson))
		self.assertTrue(Notification.objects.filter(user=self.user, type=NotificationType.LESSON_ACCESS.value).exists())

	def test_request_blocked_while_grant_active(self):
		req = services.submit_request(self.user, self.lesson)
		services.approve_request(req, self.admin)
		with self.assertRaises(AccessWorkflowError):
			services.submit_request(self.user, self.lesson)

	def test_reviewed_request_cannot_transition_again(self):
		req = services.submit_request(self.user, self.lesson)
		services.reject_request(req, self.admin, admin_notes="not yet")
		with self.assertRaises(AccessWorkflowError) as ctx:
			services.approve_request(req, self.admin)
		self.assertEqual(ctx.exception.status_code, 409)
		self.assertFalse(UserLessonAccess.objects.exists())

	def test_rejected_user_may_request_again(self):
		req = services.submit_request(self.user, self.lesson)
		services.reject_request(req, self.admin)
		again = services.submit_request(self.user, self.lesson)
		self.assertNotEqual(again.pk, req.pk)
		self.assertEqual(LessonRequest.objects.filter(user=self.user).count(), 2)

	def test_past_expiry_rejected(self):
		req = services.submit_request(self.user, self.lesson)
		with self.assertRaises(AccessWorkflowError) as ctx:
			services.approve_request(req, self.admin, expires_at=timezone.now() - timedelta(hours=1))
		self.assertEqual(ctx.exception.status_code, 400)
		req.refresh_from_db()
		self.assertEqual(req.status, RequestStatus.PENDING.value)

	def test_expired_grant_is_inactive_and_refreshed_on_approval(self):
		UserLessonAccess.objects.create(
			user=self.user, lesson=self.lesson, subject=self.subject,
			granted_at=timezone.now() - timedelta(days=10),
			expires_at=timezone.now() - timedelta(days=1),
		)
		self.assertFalse(services.has_active_access(self.user, self.lesson))
		req = services.submit_request(self.user, self.lesson)
		services.approve_request(req, self.admin)
		grant = UserLessonAccess.objects.get(user=self.user, lesson=self.lesson)
		self.assertIsNone(grant.expires_at)
		self.assertEqual(UserLessonAccess.objects.count(), 1)

	def test_admin_always_has_access(self):
		self.assertTrue(services.has_active_access(self.admin, self.lesson))
		self.assertIsNone(services.active_lesson_ids_for(self.admin))

	def test_expire_access_removes_lapsed_grants(self):
		UserLessonAccess.objects.create(
			user=self.user, lesson=self.lesson, subject=self.subject,
			granted_at=timezone.now() - timedelta(days=3),
			expires_at=timezone.now() - timedelta(minutes=5),
		)
		removed = services.expire_access()
		self.assertEqual(len(removed), 1)
		self.assertFalse(UserLessonAccess.objects.exists())


class ExpireLessonAccessCommandTests(TestCase):
	def setUp(self):
		self.user = User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		subject = Subject.objects.create(id="phy", name="Physics")
		lesson = SubjectLesson.objects.create(subject=subject, title="Motion")
		UserLessonAccess.objects.create(
			user=self.user, lesson=lesson, subject=subject,
			granted_at=timezone.now() - timedelta(days=3),
			expires_at=timezone.now() - timedelta(days=1),
		)

	def test_dry_run_keeps_grants(self):
		out = StringIO()
		call_command("expire_lesson_access", "--dry-run", stdout=out)
		self.assertIn("1 grant(s) would be removed", out.getvalue())
		self.assertEqual(UserLessonAccess.objects.count(), 1)

	def test_command_removes_grants(self):
		out = StringIO()
		call_command("expire_lesson_access", stdout=out)
		self.assertIn("Removed 1", out.getvalue())
		self.assertEqual(UserLessonAccess.objects.count(), 0)
		self.assertEqual(Notification.objects.filter(user=self.user).count(), 1)
