import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import QuerySet

from accounts.models import User
from quizbank.sysutils.constants import NotificationType, Priority, UserRole
from quizbank.sysutils.tasks import fire_and_forget

from .models import Notification

logger = logging.getLogger(__name__)

TOAST_LIMIT = 3


def _email_notification(email: str, title: str, message: str) -> None:
	"""Send one notification e-mail. Runs through ``fire_and_forget``."""
	from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None)
	if not from_email or not email:
		return
	send_mail(
		subject=title,
		message=message,
		from_email=from_email,
		recipient_list=[email],
	)


def notify(
	user: User,
	type: str,
	title: str,
	message: str,
	data: Optional[Dict[str, Any]] = None,
	priority: str = Priority.MEDIUM.value,
) -> Notification:
	notification = Notification.objects.create(
		user=user,
		type=type,
		title=title,
		message=message,
		data=data or {},
		priority=priority,
	)
	if priority == Priority.HIGH.value and getattr(settings, 'NOTIFY_BY_EMAIL', False):
		email = user.email
		transaction.on_commit(lambda: fire_and_forget(_email_notification, email, title, message))
	return notification


def broadcast(title: str, message: str, priority: str = Priority.MEDIUM.value, data: Optional[Dict[str, Any]] = None) -> List[Notification]:
	"""Create a broadcast notification for every active non-admin user."""
	recipients = User.objects.filter(is_active=True).exclude(role=UserRole.ADMIN.value)
	rows = [
		Notification(
			user=user,
			type=NotificationType.BROADCAST.value,
			title=title,
			message=message,
			data=data or {},
			priority=priority,
		)
		for user in recipients
	]
	created = Notification.objects.bulk_create(rows)
	logger.info("Broadcast '%s' sent to %d users", title, len(created))
	if priority == Priority.HIGH.value and getattr(settings, 'NOTIFY_BY_EMAIL', False):
		for row in created:
			fire_and_forget(_email_notification, row.user.email, title, message)
	return created


def unread_for(user: User) -> QuerySet:
	return Notification.objects.filter(user=user, read_status=False)


def toasts_for(user: User) -> List[Notification]:
	"""The few most recent unread notifications a client should pop up."""
	return list(unread_for(user).order_by('-created_at')[:TOAST_LIMIT])


def mark_all_read(user: User) -> int:
	return unread_for(user).update(read_status=True)
