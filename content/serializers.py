from rest_framework import serializers

from .models import Subject, SubjectLesson, LessonVideo, AppText
from .youtube import extract_video_id, thumbnail_url_for, embed_url_for


class SubjectSerializer(serializers.ModelSerializer):
	lesson_count = serializers.IntegerField(read_only=True, required=False)

	class Meta:
		model = Subject
		fields = [
			'id', 'name', 'description', 'icon', 'color', 'image_url', 'lesson_count',
			'created_by', 'created_at', 'updated_at',
		]
		read_only_fields = ['created_by', 'created_at', 'updated_at']

	def get_fields(self):
		fields = super().get_fields()
		# The slug is chosen on create and fixed afterwards
		if isinstance(self.instance, Subject):
			fields['id'].read_only = True
		return fields


class SubjectLessonSerializer(serializers.ModelSerializer):
	subject_name = serializers.CharField(source='subject.name', read_only=True)
	video_count = serializers.IntegerField(read_only=True, required=False)
	has_access = serializers.BooleanField(read_only=True, required=False)

	class Meta:
		model = SubjectLesson
		fields = [
			'id', 'subject', 'subject_name', 'title', 'description', 'thumbnail_url', 'video_count', 'has_access',
			'created_by', 'created_at', 'updated_at',
		]
		read_only_fields = ['created_by', 'created_at', 'updated_at']


class LessonVideoSerializer(serializers.ModelSerializer):
	video_id = serializers.SerializerMethodField()
	embed_url = serializers.SerializerMethodField()

	class Meta:
		model = LessonVideo
		fields = [
			'id', 'lesson', 'subject', 'title', 'description', 'youtube_url', 'video_id', 'embed_url',
			'thumbnail_url', 'duration', 'position', 'created_by', 'created_at', 'updated_at',
		]
		# subject follows the lesson, position is managed by the ordering endpoints
		read_only_fields = ['subject', 'position', 'created_by', 'created_at', 'updated_at']

	def get_video_id(self, obj) -> str | None:
		return extract_video_id(obj.youtube_url)

	def get_embed_url(self, obj) -> str | None:
		return embed_url_for(obj.youtube_url)

	def validate_youtube_url(self, value):
		if not extract_video_id(value):
			raise serializers.ValidationError("Not a recognised YouTube video URL.")
		return value

	def validate(self, attrs):
		lesson = attrs.get('lesson')
		if self.instance is not None and lesson is not None and lesson.pk != self.instance.lesson_id:
			raise serializers.ValidationError({"lesson": "Videos cannot be moved between lessons."})
		youtube_url = attrs.get('youtube_url')
		if youtube_url and not attrs.get('thumbnail_url'):
			url_changed = self.instance is None or youtube_url != self.instance.youtube_url
			if url_changed or not self.instance.thumbnail_url:
				attrs['thumbnail_url'] = thumbnail_url_for(youtube_url)
		return attrs


class VideoMoveSerializer(serializers.Serializer):
	direction = serializers.ChoiceField(choices=['up', 'down'])


class VideoReorderSerializer(serializers.Serializer):
	lesson = serializers.PrimaryKeyRelatedField(queryset=SubjectLesson.objects.all())
	video_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)


class FeedVideoSerializer(serializers.ModelSerializer):
	class Meta:
		model = LessonVideo
		fields = ['id', 'title', 'description', 'youtube_url', 'thumbnail_url', 'duration', 'position', 'created_at']


class FeedLessonSerializer(serializers.ModelSerializer):
	videos = FeedVideoSerializer(many=True, read_only=True)
	video_count = serializers.SerializerMethodField()

	class Meta:
		model = SubjectLesson
		fields = ['id', 'title', 'description', 'thumbnail_url', 'video_count', 'videos']

	def get_video_count(self, obj) -> int:
		return len(obj.videos.all())


class FeedSubjectSerializer(serializers.ModelSerializer):
	lessons = FeedLessonSerializer(many=True, read_only=True)
	lesson_count = serializers.SerializerMethodField()

	class Meta:
		model = Subject
		fields = ['id', 'name', 'description', 'icon', 'color', 'image_url', 'lesson_count', 'lessons']

	def get_lesson_count(self, obj) -> int:
		return len(obj.lessons.all())


class AppTextSerializer(serializers.ModelSerializer):
	class Meta:
		model = AppText
		fields = ['id', 'key', 'value', 'description', 'created_by', 'created_at', 'updated_at']
		read_only_fields = ['created_by', 'created_at', 'updated_at']


class AppTextBulkSerializer(serializers.Serializer):
	"""Upsert many texts at once: ``{"texts": {"hero_title": "..."}}``."""
	texts = serializers.DictField(child=serializers.CharField(allow_blank=True), allow_empty=False)
