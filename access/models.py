import uuid

from django.db import models
from django.conf import settings
from django.utils import timezone

from content.models import Subject, SubjectLesson
from quizbank.sysutils.constants import RequestStatus, choices


class LessonRequest(models.Model):
	"""A user's request to be let into a lesson. pending -> approved | rejected."""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='lesson_requests')
	lesson = models.ForeignKey(SubjectLesson, on_delete=models.CASCADE, related_name='requests')
	subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name='lesson_requests')
	status = models.CharField(max_length=20, choices=choices(RequestStatus), default=RequestStatus.PENDING.value)
	message = models.TextField(blank=True, default="")
	admin_notes = models.TextField(blank=True, default="")
	requested_at = models.DateTimeField(auto_now_add=True)
	reviewed_at = models.DateTimeField(null=True, blank=True)
	reviewed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviewed_lesson_requests')
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ["-requested_at"]
		constraints = [
			models.UniqueConstraint(
				fields=["user", "lesson"],
				condition=models.Q(status=RequestStatus.PENDING.value),
				name="access_req_one_pending",
			),
		]
		indexes = [
			models.Index(fields=["user", "lesson", "status"], name="access_req_user_lesson_idx"),
			models.Index(fields=["status", "requested_at"], name="access_req_status_idx"),
		]

	def save(self, *args, **kwargs):
		if self.lesson_id:
			self.subject_id = self.lesson.subject_id
		super().save(*args, **kwargs)

	@property
	def is_pending(self) -> bool:
		return self.status == RequestStatus.PENDING.value

	def __str__(self) -> str:
		return f"{self.user_id} -> {self.lesson_id} ({self.status})"


class UserLessonAccess(models.Model):
	"""Grant letting a user see a lesson, optionally until ``expires_at``."""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='lesson_access')
	lesson = models.ForeignKey(SubjectLesson, on_delete=models.CASCADE, related_name='access_grants')
	subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name='access_grants')
	granted_at = models.DateTimeField()
	granted_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='granted_lesson_access')
	expires_at = models.DateTimeField(null=True, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-granted_at"]
		constraints = [
			models.UniqueConstraint(fields=["user", "lesson"], name="access_unique_user_lesson"),
		]
		indexes = [
			models.Index(fields=["expires_at"], name="access_grant_expires_idx"),
		]

	def save(self, *args, **kwargs):
		if self.lesson_id:
			self.subject_id = self.lesson.subject_id
		super().save(*args, **kwargs)

	def is_active(self, now=None) -> bool:
		if self.expires_at is None:
			return True
		return self.expires_at > (now or timezone.now())

	def __str__(self) -> str:
		return f"{self.user_id} @ {self.lesson_id}"
