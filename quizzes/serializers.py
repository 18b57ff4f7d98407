from django.conf import settings
from rest_framework import serializers

from .models import Paper, Quiz, QuizAttempt, QuestionImage
from .scoring import QuizScoringError, validate_questions


def _is_admin_request(context) -> bool:
	request = context.get('request') if context else None
	user = getattr(request, 'user', None)
	return bool(getattr(user, 'is_admin', False))


class PaperSerializer(serializers.ModelSerializer):
	quiz_count = serializers.IntegerField(read_only=True, required=False)

	class Meta:
		model = Paper
		fields = [
			'id', 'title', 'year', 'subject', 'difficulty', 'description', 'content_url', 'thumbnail_url',
			'access_level', 'parameters', 'quiz_count', 'created_by', 'created_at', 'updated_at',
		]
		read_only_fields = ['created_by', 'created_at', 'updated_at']


class QuizIntroductionSerializer(serializers.Serializer):
	title = serializers.CharField(required=False, allow_blank=True)
	subtitle = serializers.CharField(required=False, allow_blank=True)
	instructions = serializers.ListField(child=serializers.CharField(), required=False)
	button_text = serializers.CharField(required=False, allow_blank=True)


class QuizSerializer(serializers.ModelSerializer):
	question_count = serializers.IntegerField(read_only=True)
	introduction = serializers.JSONField(required=False, allow_null=True)

	class Meta:
		model = Quiz
		fields = [
			'id', 'paper', 'title', 'description', 'questions', 'question_count', 'time_limit', 'passing_score',
			'difficulty', 'category', 'introduction', 'created_by', 'created_at', 'updated_at',
		]
		read_only_fields = ['created_by', 'created_at', 'updated_at']

	def validate_questions(self, value):
		try:
			return validate_questions(value)
		except QuizScoringError as exc:
			raise serializers.ValidationError(str(exc))

	def validate_introduction(self, value):
		if value is None:
			return None
		intro = QuizIntroductionSerializer(data=value)
		intro.is_valid(raise_exception=True)
		return intro.validated_data

	def validate_passing_score(self, value):
		if value > 100:
			raise serializers.ValidationError("passing_score is a percentage (0-100).")
		return value

	def validate_time_limit(self, value):
		if value <= 0:
			raise serializers.ValidationError("time_limit must be at least one minute.")
		return value

	def to_representation(self, instance):
		data = super().to_representation(instance)
		# Learners never receive the answer key
		if not _is_admin_request(self.context):
			data['questions'] = [
				{k: v for k, v in q.items() if k != 'correct_answer'}
				for q in (data.get('questions') or [])
			]
		return data


class QuizListSerializer(serializers.ModelSerializer):
	question_count = serializers.IntegerField(read_only=True)

	class Meta:
		model = Quiz
		fields = [
			'id', 'paper', 'title', 'description', 'question_count', 'time_limit', 'passing_score',
			'difficulty', 'category', 'created_at',
		]


class AttemptSubmitSerializer(serializers.Serializer):
	"""Answer sheet: ``{"answers": {"q1": 2, "q2": null}, "time_spent": 95}``."""
	answers = serializers.DictField(child=serializers.IntegerField(allow_null=True, min_value=0), allow_empty=True)
	time_spent = serializers.IntegerField(min_value=0, default=0)


class QuizAttemptSerializer(serializers.ModelSerializer):
	quiz_title = serializers.CharField(source='quiz.title', read_only=True)
	user_name = serializers.CharField(source='user.name', read_only=True)

	class Meta:
		model = QuizAttempt
		fields = [
			'id', 'user', 'user_name', 'quiz', 'quiz_title', 'responses', 'score', 'total_points', 'percentage',
			'passed', 'time_spent', 'timed_out', 'completed_at', 'created_at',
		]
		read_only_fields = fields


class QuestionImageSerializer(serializers.ModelSerializer):
	url = serializers.SerializerMethodField()

	class Meta:
		model = QuestionImage
		fields = ['id', 'image', 'url', 'uploaded_by', 'created_at']
		read_only_fields = ['id', 'url', 'uploaded_by', 'created_at']

	def get_url(self, obj) -> str:
		request = self.context.get('request')
		url = obj.image.url
		return request.build_absolute_uri(url) if request and url.startswith('/') else url

	def validate_image(self, value):
		limit = getattr(settings, 'QUESTION_IMAGE_MAX_BYTES', 5 * 1024 * 1024)
		if value.size > limit:
			raise serializers.ValidationError(f"Image must be at most {limit // (1024 * 1024)} MiB.")
		content_type = getattr(value, 'content_type', '') or ''
		if content_type and not content_type.startswith('image/'):
			raise serializers.ValidationError("Only image uploads are allowed.")
		return value
