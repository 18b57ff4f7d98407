"""Lesson request / access approval workflow.

Requests move ``pending -> approved | rejected`` and only admins move
them. Approval creates or refreshes the ``UserLessonAccess`` grant for
the requester inside the same transaction, with the request row locked.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Set

from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from accounts.models import User
from content.models import SubjectLesson
from notifications.services import notify
from quizbank.sysutils.constants import NotificationType, Priority, RequestStatus

from .models import LessonRequest, UserLessonAccess

logger = logging.getLogger(__name__)

DUPLICATE_PENDING = "You already have a pending request for this lesson."


class AccessWorkflowError(Exception):
	"""A workflow rule was broken. ``status_code`` is the HTTP status to answer with."""

	def __init__(self, detail: str, status_code: int = 409):
		super().__init__(detail)
		self.detail = detail
		self.status_code = status_code


def active_grants(now: Optional[datetime] = None) -> QuerySet:
	now = now or timezone.now()
	return UserLessonAccess.objects.filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))


def has_active_access(user: User, lesson: SubjectLesson, now: Optional[datetime] = None) -> bool:
	if getattr(user, 'is_admin', False):
		return True
	if not user or not user.is_authenticated:
		return False
	return active_grants(now).filter(user=user, lesson=lesson).exists()


def active_lesson_ids_for(user: User, now: Optional[datetime] = None) -> Optional[Set]:
	"""Ids of lessons ``user`` may open; ``None`` means all of them (admins)."""
	if getattr(user, 'is_admin', False):
		return None
	return set(active_grants(now).filter(user=user).values_list('lesson_id', flat=True))


def sync_lesson_subject(lesson: SubjectLesson) -> int:
	"""Carry a lesson's new subject onto its requests and grants."""
	changed = LessonRequest.objects.filter(lesson=lesson).exclude(subject_id=lesson.subject_id).update(subject_id=lesson.subject_id)
	changed += UserLessonAccess.objects.filter(lesson=lesson).exclude(subject_id=lesson.subject_id).update(subject_id=lesson.subject_id)
	return changed


def _resolve_expiry(expires_at: Optional[datetime], duration_days: Optional[int], now: datetime) -> Optional[datetime]:
	if expires_at is not None and duration_days is not None:
		raise AccessWorkflowError("Give either expires_at or duration_days, not both.", status_code=400)
	if duration_days is not None:
		if duration_days <= 0:
			raise AccessWorkflowError("duration_days must be positive.", status_code=400)
		return now + timedelta(days=duration_days)
	if expires_at is not None and expires_at <= now:
		raise AccessWorkflowError("expires_at must be in the future.", status_code=400)
	return expires_at


def _upsert_grant(user: User, lesson: SubjectLesson, admin: Optional[User], expires_at: Optional[datetime], now: datetime) -> UserLessonAccess:
	grant, created = UserLessonAccess.objects.select_for_update().get_or_create(
		user=user,
		lesson=lesson,
		defaults={
			'subject_id': lesson.subject_id,
			'granted_at': now,
			'granted_by': admin,
			'expires_at': expires_at,
		},
	)
	if not created:
		grant.granted_at = now
		grant.granted_by = admin
		grant.expires_at = expires_at
		grant.save(update_fields=['subject', 'granted_at', 'granted_by', 'expires_at'])
	return grant


def submit_request(user: User, lesson: SubjectLesson, message: str = "") -> LessonRequest:
	if getattr(user, 'is_admin', False):
		raise AccessWorkflowError("Admins already have access to every lesson.", status_code=400)
	with transaction.atomic():
		# Serialises submissions for the lesson; the pending rows may not exist yet.
		SubjectLesson.objects.select_for_update().filter(pk=lesson.pk).first()
		if has_active_access(user, lesson):
			raise AccessWorkflowError("You already have access to this lesson.")
		pending = LessonRequest.objects.filter(
			user=user, lesson=lesson, status=RequestStatus.PENDING.value,
		)
		if pending.exists():
			raise AccessWorkflowError(DUPLICATE_PENDING)
		try:
			with transaction.atomic():
				req = LessonRequest.objects.create(user=user, lesson=lesson, message=message or "")
		except IntegrityError:
			raise AccessWorkflowError(DUPLICATE_PENDING)
	logger.info("Lesson request %s submitted by %s for lesson %s", req.pk, user.pk, lesson.pk)
	return req


def _lock_pending(request_id) -> LessonRequest:
	req = LessonRequest.objects.select_for_update().select_related('lesson', 'user').get(pk=request_id)
	if not req.is_pending:
		raise AccessWorkflowError(f"Request already reviewed ({req.status}).")
	return req


def approve_request(
	request: LessonRequest,
	admin: User,
	expires_at: Optional[datetime] = None,
	duration_days: Optional[int] = None,
	admin_notes: str = "",
) -> LessonRequest:
	now = timezone.now()
	expiry = _resolve_expiry(expires_at, duration_days, now)
	with transaction.atomic():
		req = _lock_pending(request.pk)
		req.status = RequestStatus.APPROVED.value
		req.reviewed_at = now
		req.reviewed_by = admin
		req.admin_notes = admin_notes or ""
		req.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'admin_notes', 'updated_at'])
		grant = _upsert_grant(req.user, req.lesson, admin, expiry, now)
		message = f"Your request for '{req.lesson.title}' was approved."
		if expiry:
			message += f" Access expires on {timezone.localtime(expiry).strftime('%Y-%m-%d %H:%M')}."
		notify(
			req.user,
			NotificationType.LESSON_ACCESS.value,
			"Lesson access approved",
			message,
			data={'lesson_id': str(req.lesson_id), 'request_id': str(req.pk), 'grant_id': str(grant.pk), 'status': req.status},
			priority=Priority.HIGH.value,
		)
	logger.info("Lesson request %s approved by %s (expires %s)", req.pk, admin.pk, expiry)
	return req


def reject_request(request: LessonRequest, admin: User, admin_notes: str = "") -> LessonRequest:
	now = timezone.now()
	with transaction.atomic():
		req = _lock_pending(request.pk)
		req.status = RequestStatus.REJECTED.value
		req.reviewed_at = now
		req.reviewed_by = admin
		req.admin_notes = admin_notes or ""
		req.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'admin_notes', 'updated_at'])
		message = f"Your request for '{req.lesson.title}' was not approved."
		if req.admin_notes:
			message += f" Note: {req.admin_notes}"
		notify(
			req.user,
			NotificationType.LESSON_ACCESS.value,
			"Lesson access request declined",
			message,
			data={'lesson_id': str(req.lesson_id), 'request_id': str(req.pk), 'status': req.status},
		)
	logger.info("Lesson request %s rejected by %s", req.pk, admin.pk)
	return req


def grant_access(user: User, lesson: SubjectLesson, admin: User, expires_at: Optional[datetime] = None, duration_days: Optional[int] = None) -> UserLessonAccess:
	"""Grant directly, without a request. Refreshes an existing grant."""
	now = timezone.now()
	expiry = _resolve_expiry(expires_at, duration_days, now)
	with transaction.atomic():
		grant = _upsert_grant(user, lesson, admin, expiry, now)
		notify(
			user,
			NotificationType.LESSON_ACCESS.value,
			"Lesson access granted",
			f"You now have access to '{lesson.title}'.",
			data={'lesson_id': str(lesson.pk), 'grant_id': str(grant.pk)},
		)
	logger.info("Access to lesson %s granted to %s by %s", lesson.pk, user.pk, admin.pk)
	return grant


def revoke_access(grant: UserLessonAccess, admin: Optional[User] = None) -> None:
	logger.info("Access %s (user %s, lesson %s) revoked by %s", grant.pk, grant.user_id, grant.lesson_id, getattr(admin, 'pk', None))
	grant.delete()


def expired_grants(now: Optional[datetime] = None) -> QuerySet:
	now = now or timezone.now()
	return UserLessonAccess.objects.filter(expires_at__isnull=False, expires_at__lte=now)


def expire_access(now: Optional[datetime] = None, notify_users: bool = True) -> List[UserLessonAccess]:
	"""Delete lapsed grants and tell their owners. Returns the removed grants."""
	now = now or timezone.now()
	with transaction.atomic():
		lapsed = list(expired_grants(now).select_for_update().select_related('user', 'lesson'))
		for grant in lapsed:
			if notify_users:
				notify(
					grant.user,
					NotificationType.LESSON_ACCESS.value,
					"Lesson access expired",
					f"Your access to '{grant.lesson.title}' has expired. You can request it again.",
					data={'lesson_id': str(grant.lesson_id)},
					priority=Priority.LOW.value,
				)
		UserLessonAccess.objects.filter(pk__in=[g.pk for g in lapsed]).delete()
	if lapsed:
		logger.info("Expired %d lesson access grants", len(lapsed))
	return lapsed
