from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
	is_admin = serializers.BooleanField(read_only=True)

	class Meta:
		model = User
		fields = [
			'id', 'email', 'name', 'avatar', 'role', 'is_admin', 'is_active', 'created_at', 'updated_at'
		]
		read_only_fields = ['id', 'email', 'role', 'is_active', 'created_at', 'updated_at']


class ProfileUpdateSerializer(serializers.ModelSerializer):
	"""Own-profile updates. Role and email are never writable here."""

	class Meta:
		model = User
		fields = ['name', 'avatar']
		extra_kwargs = {'name': {'required': False}, 'avatar': {'required': False}}


class AdminUserSerializer(serializers.ModelSerializer):
	"""Admin view of users; admins may change role and active flag."""
	is_admin = serializers.BooleanField(read_only=True)

	class Meta:
		model = User
		fields = [
			'id', 'email', 'name', 'avatar', 'role', 'is_admin', 'is_active', 'last_login', 'created_at', 'updated_at'
		]
		read_only_fields = ['id', 'email', 'name', 'avatar', 'last_login', 'created_at', 'updated_at']
