import logging
from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import Prefetch, QuerySet

from .models import Subject, SubjectLesson, LessonVideo

logger = logging.getLogger(__name__)


class VideoOrderError(Exception):
	"""Raised when a reorder request does not match the lesson's videos."""


def ordered_videos(lesson: SubjectLesson) -> List[LessonVideo]:
	return list(LessonVideo.objects.filter(lesson=lesson).order_by('position', 'created_at'))


def next_position(lesson: SubjectLesson) -> int:
	"""New videos are appended after the existing ones."""
	return LessonVideo.objects.filter(lesson=lesson).count()


def _write_positions(videos: List[LessonVideo]) -> List[LessonVideo]:
	changed = []
	for index, video in enumerate(videos):
		if video.position != index:
			video.position = index
			changed.append(video)
	if changed:
		LessonVideo.objects.bulk_update(changed, ['position'])
	return videos


def sync_video_subjects(lesson: SubjectLesson) -> int:
	"""Point the lesson's videos at the lesson's current subject."""
	return LessonVideo.objects.filter(lesson=lesson).exclude(subject_id=lesson.subject_id).update(subject_id=lesson.subject_id)


@transaction.atomic
def renumber_videos(lesson: SubjectLesson) -> List[LessonVideo]:
	"""Rewrite positions of a lesson's videos as 0..n-1 keeping current order."""
	return _write_positions(ordered_videos(lesson))


@transaction.atomic
def move_video(video: LessonVideo, direction: str) -> List[LessonVideo]:
	"""Swap a video with its neighbour. Moving past either end is a no-op."""
	if direction not in ('up', 'down'):
		raise VideoOrderError("direction must be 'up' or 'down'.")
	videos = ordered_videos(video.lesson)
	index = next((i for i, v in enumerate(videos) if v.pk == video.pk), -1)
	if index == -1:
		raise VideoOrderError("Video does not belong to this lesson.")
	target = index - 1 if direction == 'up' else index + 1
	if 0 <= target < len(videos):
		videos[index], videos[target] = videos[target], videos[index]
	return _write_positions(videos)


@transaction.atomic
def reorder_videos(lesson: SubjectLesson, video_ids: Iterable) -> List[LessonVideo]:
	"""Apply an explicit order; ids must be exactly the lesson's videos."""
	ids = [str(v) for v in video_ids]
	videos = {str(v.pk): v for v in ordered_videos(lesson)}
	if len(ids) != len(set(ids)):
		raise VideoOrderError("Duplicate video ids in order.")
	if set(ids) != set(videos):
		raise VideoOrderError("Order must list every video of the lesson exactly once.")
	result = _write_positions([videos[i] for i in ids])
	logger.info("Reordered %d videos in lesson %s", len(result), lesson.pk)
	return result


@transaction.atomic
def delete_video(video: LessonVideo) -> None:
	lesson = video.lesson
	video.delete()
	renumber_videos(lesson)


def feed_queryset(lesson_ids: Optional[Iterable] = None) -> QuerySet:
	"""Subjects with nested lessons and ordered videos.

	``lesson_ids`` limits the nested lessons (users only see lessons they
	hold access to); ``None`` means every lesson.
	"""
	lessons = SubjectLesson.objects.order_by('created_at').prefetch_related(
		Prefetch('videos', queryset=LessonVideo.objects.order_by('position', 'created_at'))
	)
	if lesson_ids is not None:
		lessons = lessons.filter(id__in=list(lesson_ids))
	return Subject.objects.order_by('created_at').prefetch_related(Prefetch('lessons', queryset=lessons))
