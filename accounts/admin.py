from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
	model = User
	list_display = ("id", "name", "email", "role", "is_active", "is_staff", "created_at")
	list_filter = ("role", "is_active", "is_staff", "is_superuser")
	search_fields = ("name", "email")
	ordering = ("-created_at",)
	fieldsets = (
		(None, {'fields': ('email', 'password')}),
		('Profile', {'fields': ('name', 'avatar', 'role')}),
		('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
		('Dates', {'fields': ('last_login', 'created_at', 'updated_at')}),
	)
	readonly_fields = ("created_at", "updated_at")
	add_fieldsets = (
		(None, {
			'classes': ('wide',),
			'fields': ('email', 'name', 'role', 'password1', 'password2', 'is_staff', 'is_superuser', 'is_active')
		}),
	)
