from rest_framework import serializers

from accounts.models import User
from quizbank.sysutils.constants import NotificationType, Priority, choices

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
	class Meta:
		model = Notification
		fields = ['id', 'user', 'type', 'title', 'message', 'data', 'priority', 'read_status', 'created_at']
		read_only_fields = ['id', 'user', 'created_at']


class NotificationCreateSerializer(serializers.Serializer):
	"""Admin-authored notification for a single user."""
	user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
	type = serializers.ChoiceField(choices=choices(NotificationType), default=NotificationType.REMINDER.value)
	title = serializers.CharField(max_length=200)
	message = serializers.CharField()
	data = serializers.JSONField(required=False, default=dict)
	priority = serializers.ChoiceField(choices=choices(Priority), default=Priority.MEDIUM.value)


class BroadcastSerializer(serializers.Serializer):
	title = serializers.CharField(max_length=200)
	message = serializers.CharField()
	priority = serializers.ChoiceField(choices=choices(Priority), default=Priority.MEDIUM.value)
	data = serializers.JSONField(required=False, default=dict)
