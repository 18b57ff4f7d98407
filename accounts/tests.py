from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from quizbank.sysutils.constants import UserRole

from .models import User


class AccountManagerTests(TestCase):
	def test_create_user_defaults_to_user_role(self):
		user = User.objects.create_user(email="Mixed@Example.COM", name="Mixed", password="secret1")
		self.assertEqual(user.email, "mixed@example.com")
		self.assertEqual(user.role, UserRole.USER.value)
		self.assertFalse(user.is_admin)

	def test_create_superuser_is_admin(self):
		user = User.objects.create_superuser(email="root@example.com", name="Root", password="secret1")
		self.assertTrue(user.is_admin)
		self.assertTrue(user.is_staff)
		self.assertEqual(list(User.objects.admins()), [user])

	def test_name_required(self):
		with self.assertRaises(ValueError):
			User.objects.create_user(email="x@example.com", name="", password="secret1")


class AdminCommandTests(TestCase):
	def test_create_admin(self):
		out = StringIO()
		call_command("create_admin", "boss@example.com", "--name", "Boss", "--password", "secret1", stdout=out)
		self.assertTrue(User.objects.get(email="boss@example.com").is_admin)

	def test_create_admin_promotes_existing(self):
		User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		call_command("create_admin", "learner@example.com", stdout=StringIO())
		user = User.objects.get(email="learner@example.com")
		self.assertTrue(user.is_admin)
		self.assertTrue(user.is_staff)

	def test_create_admin_needs_password(self):
		with self.assertRaises(CommandError):
			call_command("create_admin", "new@example.com", stdout=StringIO())

	def test_export_admins_to_stdout(self):
		User.objects.create_superuser(email="root@example.com", name="Root", password="secret1")
		User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		out = StringIO()
		call_command("export_admins_csv", "-", stdout=out)
		body = out.getvalue()
		self.assertIn("root@example.com", body)
		self.assertNotIn("learner@example.com", body)
