import logging
from typing import Dict, Mapping, Optional

from django.db import transaction
from django.db.models import Avg, Count, Q
from django.utils import timezone

from accounts.models import User
from notifications.services import notify
from quizbank.sysutils.constants import NotificationType, Priority

from .models import Quiz, QuizAttempt
from .scoring import score_attempt

logger = logging.getLogger(__name__)


def submit_attempt(user: User, quiz: Quiz, answers: Mapping[str, Optional[int]], time_spent: int = 0) -> QuizAttempt:
	result = score_attempt(
		quiz.questions or [],
		answers,
		time_spent=time_spent,
		time_limit_minutes=quiz.time_limit,
		passing_score=quiz.passing_score,
	)
	with transaction.atomic():
		attempt = QuizAttempt.objects.create(
			user=user,
			quiz=quiz,
			responses=result.responses,
			score=result.score,
			total_points=result.total_points,
			percentage=result.percentage,
			passed=result.passed,
			time_spent=result.time_spent,
			timed_out=result.timed_out,
			completed_at=timezone.now(),
		)
		verdict = "passed" if result.passed else "did not pass"
		notify(
			user,
			NotificationType.QUIZ_RESULT.value,
			f"Quiz result: {quiz.title}",
			f"You scored {result.percentage}% and {verdict} (pass mark {quiz.passing_score}%).",
			data={
				'quiz_id': str(quiz.pk),
				'attempt_id': str(attempt.pk),
				'score': result.score,
				'total_points': result.total_points,
				'percentage': result.percentage,
				'passed': result.passed,
			},
			priority=Priority.MEDIUM.value if result.passed else Priority.LOW.value,
		)
	logger.info(
		"Quiz %s submitted by %s: %s/%s (%s%%)%s",
		quiz.pk, user.pk, result.score, result.total_points, result.percentage,
		" timed out" if result.timed_out else "",
	)
	return attempt


def quiz_stats(quiz: Quiz) -> Dict:
	agg = QuizAttempt.objects.filter(quiz=quiz).aggregate(
		attempts=Count('id'),
		passed=Count('id', filter=Q(passed=True)),
		average_percentage=Avg('percentage'),
		average_time_spent=Avg('time_spent'),
		learners=Count('user', distinct=True),
	)
	attempts = agg['attempts'] or 0
	return {
		'quiz_id': str(quiz.pk),
		'attempts': attempts,
		'learners': agg['learners'] or 0,
		'average_percentage': round(agg['average_percentage'] or 0, 2),
		'average_time_spent': round(agg['average_time_spent'] or 0, 2),
		'pass_rate': round(100 * (agg['passed'] or 0) / attempts, 2) if attempts else 0,
	}
