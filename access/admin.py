from django.contrib import admin

from .models import LessonRequest, UserLessonAccess


@admin.register(LessonRequest)
class LessonRequestAdmin(admin.ModelAdmin):
	list_display = ("id", "user", "lesson", "status", "requested_at", "reviewed_by", "reviewed_at")
	list_filter = ("status", "subject")
	search_fields = ("user__email", "user__name", "lesson__title")
	readonly_fields = ("subject", "requested_at")


@admin.register(UserLessonAccess)
class UserLessonAccessAdmin(admin.ModelAdmin):
	list_display = ("id", "user", "lesson", "granted_by", "granted_at", "expires_at")
	list_filter = ("subject",)
	search_fields = ("user__email", "lesson__title")
	readonly_fields = ("subject",)
