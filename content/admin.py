from django.contrib import admin

from .models import Subject, SubjectLesson, LessonVideo, AppText
from .services import sync_video_subjects


class LessonVideoInline(admin.TabularInline):
	model = LessonVideo
	fields = ("position", "title", "youtube_url", "duration")
	ordering = ("position",)
	extra = 0


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
	list_display = ("id", "name", "icon", "created_at")
	search_fields = ("id", "name")


@admin.register(SubjectLesson)
class SubjectLessonAdmin(admin.ModelAdmin):
	list_display = ("id", "title", "subject", "created_by", "created_at")
	list_filter = ("subject",)
	search_fields = ("title",)
	inlines = [LessonVideoInline]

	def save_model(self, request, obj, form, change):
		super().save_model(request, obj, form, change)
		if change and "subject" in form.changed_data:
			from access.services import sync_lesson_subject
			sync_video_subjects(obj)
			sync_lesson_subject(obj)


@admin.register(LessonVideo)
class LessonVideoAdmin(admin.ModelAdmin):
	list_display = ("id", "title", "lesson", "subject", "position", "duration")
	list_filter = ("subject",)
	search_fields = ("title", "youtube_url")
	readonly_fields = ("subject",)


@admin.register(AppText)
class AppTextAdmin(admin.ModelAdmin):
	list_display = ("key", "value", "updated_at")
	search_fields = ("key", "value")
