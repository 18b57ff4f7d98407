from django.test import SimpleTestCase, TestCase

from accounts.models import User
from notifications.models import Notification
from quizbank.sysutils.constants import NotificationType

from .models import Quiz
from .scoring import QuizScoringError, validate_questions, score_attempt, percentage_of
from .services import submit_attempt, quiz_stats

QUESTIONS = [
	{"id": "q1", "question": "2 + 2?", "options": ["3", "4", "5"], "correct_answer": 1},
	{"id": "q2", "question": "Capital of France?", "options": ["Paris", "Rome"], "correct_answer": 0, "points": 2},
	{"id": "q3", "question": "H2O is?", "options": ["Water", "Salt", "Sand", "Air"], "correct_answer": 0},
]


class ValidateQuestionsTests(SimpleTestCase):
	def test_defaults_points_and_keeps_order(self):
		cleaned = validate_questions(QUESTIONS)
		self.assertEqual([q["id"] for q in cleaned], ["q1", "q2", "q3"])
		self.assertEqual(cleaned[0]["points"], 1)
		self.assertEqual(cleaned[1]["points"], 2)

	def test_generates_missing_id(self):
		cleaned = validate_questions([{"question": "x?", "options": ["a", "b"], "correct_answer": 0}])
		self.assertTrue(cleaned[0]["id"])

	def test_rejects_bad_questions(self):
		bad = [
			[{"id": "a", "question": "", "options": ["a", "b"], "correct_answer": 0}],
			[{"id": "a", "question": "x", "options": ["a"], "correct_answer": 0}],
			[{"id": "a", "question": "x", "options": ["a", "b", "c", "d", "e", "f"], "correct_answer": 0}],
			[{"id": "a", "question": "x", "options": ["a", "b"], "correct_answer": 2}],
			[{"id": "a", "question": "x", "options": ["a", "b"], "correct_answer": True}],
			[{"id": "a", "question": "x", "options": ["a", "b"], "correct_answer": 0, "points": 0}],
			[
				{"id": "a", "question": "x", "options": ["a", "b"], "correct_answer": 0},
				{"id": "a", "question": "y", "options": ["a", "b"], "correct_answer": 0},
			],
		]
		for questions in bad:
			with self.assertRaises(QuizScoringError):
				validate_questions(questions)


class ScoreAttemptTests(SimpleTestCase):
	def setUp(self):
		self.questions = validate_questions(QUESTIONS)

	def test_scores_by_points(self):
		result = score_attempt(self.questions, {"q1": 1, "q2": 1, "q3": 0}, time_spent=60, time_limit_minutes=30, passing_score=70)
		self.assertEqual(result.score, 2)
		self.assertEqual(result.total_points, 4)
		self.assertEqual(result.percentage, 50)
		self.assertFalse(result.passed)
		self.assertFalse(result.timed_out)
		self.assertEqual([r["is_correct"] for r in result.responses], [True, False, True])

	def test_unanswered_counts_as_wrong(self):
		result = score_attempt(self.questions, {"q2": 0, "q3": None}, passing_score=50)
		self.assertEqual(result.score, 2)
		self.assertTrue(result.passed)
		self.assertIsNone(result.responses[0]["selected_answer"])

	def test_time_is_clamped_to_limit(self):
		result = score_attempt(self.questions, {}, time_spent=5000, time_limit_minutes=1)
		self.assertEqual(result.time_spent, 60)
		self.assertTrue(result.timed_out)

	def test_unknown_question_rejected(self):
		with self.assertRaises(QuizScoringError):
			score_attempt(self.questions, {"nope": 0})

	def test_out_of_range_answer_rejected(self):
		with self.assertRaises(QuizScoringError):
			score_attempt(self.questions, {"q2": 5})

	def test_empty_quiz_is_zero_percent(self):
		self.assertEqual(percentage_of(0, 0), 0)
		self.assertEqual(score_attempt([], {}).percentage, 0)

	def test_half_percent_rounds_up(self):
		self.assertEqual(percentage_of(5, 8), 63)
		self.assertEqual(percentage_of(1, 3), 33)
		self.assertEqual(percentage_of(2, 3), 67)
		questions = [
			{"id": f"p{i}", "question": f"Q{i}", "options": ["a", "b"], "correct_answer": 0}
			for i in range(8)
		]
		answers = {f"p{i}": 0 if i < 5 else 1 for i in range(8)}
		result = score_attempt(questions, answers, passing_score=63)
		self.assertEqual(result.percentage, 63)
		self.assertTrue(result.passed)


class SubmitAttemptTests(TestCase):
	def setUp(self):
		self.user = User.objects.create_user(email="learner@example.com", name="Learner", password="secret1")
		self.quiz = Quiz.objects.create(title="Basics", questions=validate_questions(QUESTIONS), passing_score=70)

	def test_attempt_saved_and_notified(self):
		attempt = submit_attempt(self.user, self.quiz, {"q1": 1, "q2": 0, "q3": 0}, time_spent=120)
		self.assertEqual(attempt.percentage, 100)
		self.assertTrue(attempt.passed)
		self.assertEqual(attempt.time_spent, 120)
		notification = Notification.objects.get(user=self.user)
		self.assertEqual(notification.type, NotificationType.QUIZ_RESULT.value)
		self.assertEqual(notification.data["attempt_id"], str(attempt.pk))

	def test_stats(self):
		submit_attempt(self.user, self.quiz, {"q1": 1, "q2": 0, "q3": 0})
		submit_attempt(self.user, self.quiz, {"q1": 0})
		stats = quiz_stats(self.quiz)
		self.assertEqual(stats["attempts"], 2)
		self.assertEqual(stats["learners"], 1)
		self.assertEqual(stats["pass_rate"], 50.0)
		self.assertEqual(stats["average_percentage"], 50.0)
