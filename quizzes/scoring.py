"""Question validation and server-side scoring for quiz attempts."""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

MIN_OPTIONS = 2
MAX_OPTIONS = 5


class QuizScoringError(Exception):
	"""Bad question data or an answer sheet that does not fit the quiz."""


@dataclass
class ScoreResult:
	responses: List[Dict[str, Any]] = field(default_factory=list)
	score: int = 0
	total_points: int = 0
	percentage: int = 0
	passed: bool = False
	time_spent: int = 0
	timed_out: bool = False


def _is_int(value) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)


def validate_questions(questions) -> List[Dict[str, Any]]:
	"""Check and normalise a quiz's question list.

	Missing ids are generated, option text is stripped and ``points``
	defaults to 1.
	"""
	if questions is None:
		return []
	if not isinstance(questions, list):
		raise QuizScoringError("questions must be a list.")

	seen = set()
	cleaned = []
	for index, raw in enumerate(questions, start=1):
		if not isinstance(raw, dict):
			raise QuizScoringError(f"Question {index} must be an object.")

		qid = str(raw.get('id') or uuid.uuid4().hex)
		if qid in seen:
			raise QuizScoringError(f"Duplicate question id '{qid}'.")
		seen.add(qid)

		text = str(raw.get('question') or '').strip()
		if not text:
			raise QuizScoringError(f"Question {index} has no text.")

		options = raw.get('options')
		if not isinstance(options, list):
			raise QuizScoringError(f"Question {index} options must be a list.")
		options = [str(o).strip() for o in options]
		if len(options) < MIN_OPTIONS or len(options) > MAX_OPTIONS:
			raise QuizScoringError(f"Question {index} needs between {MIN_OPTIONS} and {MAX_OPTIONS} options.")
		if any(not o for o in options):
			raise QuizScoringError(f"Question {index} has an empty option.")

		correct = raw.get('correct_answer')
		if not _is_int(correct) or not 0 <= correct < len(options):
			raise QuizScoringError(f"Question {index} correct_answer must index one of its options.")

		points = raw.get('points', 1)
		if points is None:
			points = 1
		if not _is_int(points) or points <= 0:
			raise QuizScoringError(f"Question {index} points must be a positive integer.")

		item = {
			'id': qid,
			'question': text,
			'options': options,
			'correct_answer': correct,
			'points': points,
		}
		image_url = raw.get('image_url')
		if image_url:
			item['image_url'] = str(image_url)
		cleaned.append(item)
	return cleaned


def percentage_of(score: int, total: int) -> int:
	"""Whole percent, halves rounded up (5/8 -> 63)."""
	if total <= 0:
		return 0
	return (200 * score + total) // (2 * total)


def score_attempt(
	questions: List[Dict[str, Any]],
	answers: Mapping[str, Optional[int]],
	time_spent: int = 0,
	time_limit_minutes: int = 0,
	passing_score: int = 70,
) -> ScoreResult:
	"""Mark an answer sheet against the stored questions.

	``answers`` maps question id to the selected option index; unanswered
	questions may be omitted or given as ``None``. Time beyond the limit is
	clamped and flagged as ``timed_out``.
	"""
	by_id = {str(q['id']): q for q in questions}
	unknown = [str(k) for k in answers if str(k) not in by_id]
	if unknown:
		raise QuizScoringError(f"Unknown question id(s): {', '.join(sorted(unknown))}.")

	normalised = {str(k): v for k, v in answers.items()}
	result = ScoreResult()
	for q in questions:
		qid = str(q['id'])
		points = q.get('points') or 1
		selected = normalised.get(qid)
		if selected is not None and (not _is_int(selected) or not 0 <= selected < len(q['options'])):
			raise QuizScoringError(f"Answer for question '{qid}' is not one of its options.")
		is_correct = selected is not None and selected == q['correct_answer']
		result.total_points += points
		if is_correct:
			result.score += points
		result.responses.append({
			'question_id': qid,
			'selected_answer': selected,
			'is_correct': is_correct,
		})

	result.percentage = percentage_of(result.score, result.total_points)
	result.passed = result.percentage >= passing_score

	spent = max(int(time_spent or 0), 0)
	limit_seconds = int(time_limit_minutes or 0) * 60
	if limit_seconds and spent > limit_seconds:
		spent = limit_seconds
		result.timed_out = True
	result.time_spent = spent
	return result
