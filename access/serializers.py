from rest_framework import serializers

from accounts.models import User
from content.models import SubjectLesson

from .models import LessonRequest, UserLessonAccess


class LessonRequestSerializer(serializers.ModelSerializer):
	user_name = serializers.CharField(source='user.name', read_only=True)
	user_email = serializers.EmailField(source='user.email', read_only=True)
	lesson_title = serializers.CharField(source='lesson.title', read_only=True)
	subject_name = serializers.CharField(source='subject.name', read_only=True)
	reviewed_by_name = serializers.CharField(source='reviewed_by.name', read_only=True, default=None)

	class Meta:
		model = LessonRequest
		fields = [
			'id', 'user', 'user_name', 'user_email', 'lesson', 'lesson_title', 'subject', 'subject_name',
			'status', 'message', 'admin_notes', 'requested_at', 'reviewed_at', 'reviewed_by', 'reviewed_by_name',
		]
		read_only_fields = [
			'id', 'user', 'subject', 'status', 'admin_notes', 'requested_at', 'reviewed_at', 'reviewed_by',
		]


class LessonRequestCreateSerializer(serializers.Serializer):
	lesson = serializers.PrimaryKeyRelatedField(queryset=SubjectLesson.objects.all())
	message = serializers.CharField(required=False, allow_blank=True, default="")


class ApproveRequestSerializer(serializers.Serializer):
	expires_at = serializers.DateTimeField(required=False, allow_null=True)
	duration_days = serializers.IntegerField(required=False, allow_null=True, min_value=1)
	admin_notes = serializers.CharField(required=False, allow_blank=True, default="")

	def validate(self, attrs):
		if attrs.get('expires_at') and attrs.get('duration_days'):
			raise serializers.ValidationError("Give either expires_at or duration_days, not both.")
		return attrs


class RejectRequestSerializer(serializers.Serializer):
	admin_notes = serializers.CharField(required=False, allow_blank=True, default="")


class UserLessonAccessSerializer(serializers.ModelSerializer):
	user_name = serializers.CharField(source='user.name', read_only=True)
	lesson_title = serializers.CharField(source='lesson.title', read_only=True)
	is_active = serializers.SerializerMethodField()

	class Meta:
		model = UserLessonAccess
		fields = [
			'id', 'user', 'user_name', 'lesson', 'lesson_title', 'subject',
			'granted_at', 'granted_by', 'expires_at', 'is_active', 'created_at',
		]
		read_only_fields = fields

	def get_is_active(self, obj) -> bool:
		return obj.is_active()


class GrantAccessSerializer(serializers.Serializer):
	user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
	lesson = serializers.PrimaryKeyRelatedField(queryset=SubjectLesson.objects.all())
	expires_at = serializers.DateTimeField(required=False, allow_null=True)
	duration_days = serializers.IntegerField(required=False, allow_null=True, min_value=1)
