from django.contrib import admin

from .models import Paper, Quiz, QuizAttempt, QuestionImage


@admin.register(Paper)
class PaperAdmin(admin.ModelAdmin):
	list_display = ("id", "title", "year", "subject", "difficulty", "access_level", "created_at")
	list_filter = ("difficulty", "access_level", "year")
	search_fields = ("title", "subject")


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
	list_display = ("id", "title", "category", "difficulty", "time_limit", "passing_score", "created_at")
	list_filter = ("difficulty", "category")
	search_fields = ("title", "description")


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
	list_display = ("id", "user", "quiz", "score", "total_points", "percentage", "passed", "timed_out", "completed_at")
	list_filter = ("passed", "timed_out", "quiz")


@admin.register(QuestionImage)
class QuestionImageAdmin(admin.ModelAdmin):
	list_display = ("id", "image", "uploaded_by", "created_at")
