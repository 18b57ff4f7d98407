from rest_framework import serializers

from accounts.models import User


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255)
    password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True, min_length=6)

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, min_length=6)
    new_password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True, min_length=6)


class AppTextMapSerializer(serializers.Serializer):
    """Placeholder for schema generation of the ``{key: value}`` map."""
    texts = serializers.DictField(child=serializers.CharField())


class UnreadCountSerializer(serializers.Serializer):
    unread = serializers.IntegerField()


class QuizStatsSerializer(serializers.Serializer):
    quiz_id = serializers.CharField()
    attempts = serializers.IntegerField()
    learners = serializers.IntegerField()
    average_percentage = serializers.FloatField()
    average_time_spent = serializers.FloatField()
    pass_rate = serializers.FloatField()


class AdminDashboardSerializer(serializers.Serializer):
    users = serializers.IntegerField()
    admins = serializers.IntegerField()
    subjects = serializers.IntegerField()
    lessons = serializers.IntegerField()
    videos = serializers.IntegerField()
    papers = serializers.IntegerField()
    quizzes = serializers.IntegerField()
    attempts = serializers.IntegerField()
    average_percentage = serializers.FloatField()
    pending_requests = serializers.IntegerField()
    active_grants = serializers.IntegerField()
    unread_notifications = serializers.IntegerField()
