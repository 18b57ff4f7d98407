from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
	list_display = ("id", "user", "type", "title", "priority", "read_status", "created_at")
	list_filter = ("type", "priority", "read_status")
	search_fields = ("title", "message", "user__email")
