import uuid

from django.db import models
from django.conf import settings

from content.models import TimestampedModel
from quizbank.sysutils.constants import AccessLevel, Difficulty, choices


class Paper(TimestampedModel):
	"""A past paper or study document quizzes can be built from."""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	title = models.CharField(max_length=255)
	year = models.PositiveIntegerField(null=True, blank=True)
	subject = models.CharField(max_length=120, blank=True, default="")
	difficulty = models.CharField(max_length=10, choices=choices(Difficulty), default=Difficulty.MEDIUM.value)
	description = models.TextField(blank=True, default="")
	content_url = models.URLField(max_length=500, null=True, blank=True)
	thumbnail_url = models.URLField(max_length=500, null=True, blank=True)
	access_level = models.CharField(max_length=10, choices=choices(AccessLevel), default=AccessLevel.FREE.value)
	parameters = models.JSONField(default=dict, blank=True)
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_papers')

	class Meta:
		ordering = ["-created_at"]

	def __str__(self) -> str:
		return self.title


class Quiz(TimestampedModel):
	"""Timed multiple-choice quiz.

	``questions`` holds a list of ``{id, question, options, correct_answer,
	image_url?, points?}`` objects, checked by ``quizzes.scoring.validate_questions``.
	"""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	paper = models.ForeignKey(Paper, on_delete=models.SET_NULL, null=True, blank=True, related_name='quizzes')
	title = models.CharField(max_length=255)
	description = models.TextField(blank=True, default="")
	questions = models.JSONField(default=list, blank=True)
	time_limit = models.PositiveIntegerField(default=30, help_text="Minutes")
	passing_score = models.PositiveIntegerField(default=70, help_text="Percent")
	difficulty = models.CharField(max_length=10, choices=choices(Difficulty), default=Difficulty.MEDIUM.value)
	category = models.CharField(max_length=120, blank=True, default="")
	introduction = models.JSONField(null=True, blank=True)
	created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_quizzes')

	class Meta:
		ordering = ["-created_at"]
		verbose_name_plural = "quizzes"

	@property
	def question_count(self) -> int:
		return len(self.questions or [])

	def __str__(self) -> str:
		return self.title


class QuizAttempt(models.Model):
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='quiz_attempts')
	quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='attempts')
	responses = models.JSONField(default=list, blank=True)
	score = models.PositiveIntegerField(default=0)
	total_points = models.PositiveIntegerField(default=0)
	percentage = models.PositiveIntegerField(default=0)
	passed = models.BooleanField(default=False)
	time_spent = models.PositiveIntegerField(default=0, help_text="Seconds")
	timed_out = models.BooleanField(default=False)
	completed_at = models.DateTimeField()
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-completed_at"]
		indexes = [
			models.Index(fields=["user", "quiz"], name="quiz_attempt_user_quiz_idx"),
		]

	def __str__(self) -> str:
		return f"{self.user_id} {self.quiz_id} {self.percentage}%"


def question_image_upload_to(instance, filename):
	return f"question-images/{uuid.uuid4().hex}/{filename}"


class QuestionImage(models.Model):
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	image = models.ImageField(upload_to=question_image_upload_to)
	uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='question_images')
	created_at = models.DateTimeField(auto_now_add=True)

	class Meta:
		ordering = ["-created_at"]

	def __str__(self) -> str:
		return self.image.name
