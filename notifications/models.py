import uuid

from django.db import models
from django.conf import settings

from quizbank.sysutils.constants import NotificationType, Priority, choices


class Notification(models.Model):
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
	type = models.CharField(max_length=20, choices=choices(NotificationType))
	title = models.CharField(max_length=200)
	message = models.TextField()
	data = models.JSONField(default=dict, blank=True)
	priority = models.CharField(max_length=10, choices=choices(Priority), default=Priority.MEDIUM.value)
	read_status = models.BooleanField(default=False)
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-created_at"]
		indexes = [
			models.Index(fields=["user", "read_status", "created_at"], name="notif_user_unread_idx"),
		]

	def __str__(self) -> str:
		return f"{self.user_id}: {self.title}"
