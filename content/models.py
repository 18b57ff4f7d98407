import uuid

from django.db import models
from django.conf import settings


class TimestampedModel(models.Model):
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		abstract = True


class Subject(TimestampedModel):
	"""Top level of the feed. Keyed by a short slug such as ``sft``."""
	id = models.SlugField(max_length=50, primary_key=True)
	name = models.CharField(max_length=120)
	description = models.TextField(blank=True, default="")
	icon = models.CharField(max_length=16, default="📚")
	color = models.CharField(max_length=80, default="from-blue-500 to-indigo-600")
	image_url = models.URLField(max_length=500, null=True, blank=True)
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_subjects')

	class Meta:
		ordering = ["created_at"]

	def __str__(self) -> str:
		return self.name


class SubjectLesson(TimestampedModel):
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name="lessons")
	title = models.CharField(max_length=200)
	description = models.TextField(blank=True, default="")
	thumbnail_url = models.URLField(max_length=500, null=True, blank=True)
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_lessons')

	class Meta:
		ordering = ["created_at"]
		indexes = [
			models.Index(fields=["subject", "created_at"], name="content_lesson_subject_idx"),
		]

	def __str__(self) -> str:
		return f"{self.subject_id} - {self.title}"


class LessonVideo(TimestampedModel):
	"""A YouTube video inside a lesson.

	``position`` is the 0-based display order within the lesson; the
	ordering helpers in ``content.services`` keep it contiguous.
	"""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	lesson = models.ForeignKey(SubjectLesson, on_delete=models.CASCADE, related_name="videos")
	# Denormalised from lesson.subject so videos can be filtered by subject directly
	subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name="videos")
	title = models.CharField(max_length=200)
	description = models.TextField(blank=True, default="")
	youtube_url = models.URLField(max_length=500)
	thumbnail_url = models.URLField(max_length=500, blank=True, default="")
	duration = models.CharField(max_length=20, default="0:00")
	position = models.PositiveIntegerField(default=0)
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_videos')

	class Meta:
		ordering = ["position", "created_at"]
		indexes = [
			models.Index(fields=["lesson", "position"], name="content_video_position_idx"),
		]

	def save(self, *args, **kwargs):
		if self.lesson_id:
			self.subject_id = self.lesson.subject_id
		super().save(*args, **kwargs)

	def __str__(self) -> str:
		return self.title


class AppText(TimestampedModel):
	"""Editable UI copy (hero title, section headings) keyed by name."""
	key = models.CharField(max_length=100, unique=True)
	value = models.TextField()
	description = models.CharField(max_length=255, blank=True, default="")
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='app_texts')

	class Meta:
		ordering = ["key"]

	def __str__(self) -> str:
		return self.key
