from datetime import timedelta

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone
from knox.models import AuthToken
from rest_framework.test import APIClient

from accounts.models import User
from access.models import LessonRequest, UserLessonAccess
from content.models import Subject, SubjectLesson, LessonVideo
from notifications.models import Notification
from quizzes.models import Quiz, QuizAttempt
from quizbank.sysutils.constants import UserRole, RequestStatus, NotificationType


def make_admin(email="admin@example.com"):
	return User.objects.create_user(email=email, name="Admin", password="secret1", role=UserRole.ADMIN.value, is_staff=True)


def make_user(email="learner@example.com", name="Learner"):
	return User.objects.create_user(email=email, name=name, password="secret1")


class AuthTests(TestCase):
	def setUp(self):
		self.client = APIClient()

	def test_register_returns_token_and_user_role(self):
		resp = self.client.post('/api-v1/auth/register/', {
			"email": "New@Example.com", "name": "New", "password": "secret1", "confirm_password": "secret1",
		}, format='json')
		self.assertEqual(resp.status_code, 201)
		self.assertIn("token", resp.data)
		self.assertEqual(resp.data["user"]["role"], UserRole.USER.value)
		self.assertTrue(User.objects.filter(email="new@example.com").exists())

	def test_register_rejects_duplicates_and_mismatch(self):
		make_user()
		resp = self.client.post('/api-v1/auth/register/', {
			"email": "learner@example.com", "name": "X", "password": "secret1", "confirm_password": "secret1",
		}, format='json')
		self.assertEqual(resp.status_code, 400)
		resp = self.client.post('/api-v1/auth/register/', {
			"email": "other@example.com", "name": "X", "password": "secret1", "confirm_password": "secret2",
		}, format='json')
		self.assertEqual(resp.status_code, 400)

	def test_login_and_logout(self):
		make_user()
		resp = self.client.post('/api-v1/auth/login/', {"email": "learner@example.com", "password": "secret1"}, format='json')
		self.assertEqual(resp.status_code, 200)
		token = resp.data["token"]
		self.client.credentials(HTTP_AUTHORIZATION=f"Token {token}")
		resp = self.client.get('/api-v1/auth/me/')
		self.assertEqual(resp.status_code, 200)
		self.assertFalse(resp.data["is_admin"])
		resp = self.client.post('/api-v1/auth/logout/')
		self.assertEqual(resp.status_code, 204)
		self.assertEqual(AuthToken.objects.count(), 0)

	def test_login_bad_password(self):
		make_user()
		resp = self.client.post('/api-v1/auth/login/', {"email": "learner@example.com", "password": "wrong!!"}, format='json')
		self.assertEqual(resp.status_code, 400)

	def test_login_inactive(self):
		user = make_user()
		user.is_active = False
		user.save()
		resp = self.client.post('/api-v1/auth/login/', {"email": "learner@example.com", "password": "secret1"}, format='json')
		self.assertEqual(resp.status_code, 403)

	def test_me_patch_cannot_change_role(self):
		user = make_user()
		self.client.force_authenticate(user=user)
		resp = self.client.patch('/api-v1/auth/me/', {"name": "Renamed", "role": "admin"}, format='json')
		self.assertEqual(resp.status_code, 200)
		user.refresh_from_db()
		self.assertEqual(user.name, "Renamed")
		self.assertEqual(user.role, UserRole.USER.value)

	def test_change_password(self):
		user = make_user()
		self.client.force_authenticate(user=user)
		resp = self.client.post('/api-v1/auth/change-password/', {
			"current_password": "secret1", "new_password": "secret2", "confirm_password": "secret2",
		}, format='json')
		self.assertEqual(resp.status_code, 200)
		user.refresh_from_db()
		self.assertTrue(user.check_password("secret2"))


class AdminUserTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()

	def test_non_admin_forbidden(self):
		self.client.force_authenticate(user=self.user)
		self.assertEqual(self.client.get('/api-v1/admin/users/').status_code, 403)

	def test_admin_promotes_user(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.patch(f'/api-v1/admin/users/{self.user.pk}/', {"role": "admin"}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.user.refresh_from_db()
		self.assertTrue(self.user.is_admin)
		self.assertTrue(self.user.is_staff)

	def test_admin_cannot_demote_self(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.patch(f'/api-v1/admin/users/{self.admin.pk}/', {"role": "user"}, format='json')
		self.assertEqual(resp.status_code, 400)

	def test_filter_by_role(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.get('/api-v1/admin/users/?role=user')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual([u["email"] for u in resp.data], ["learner@example.com"])


class ContentApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()
		self.subject = Subject.objects.create(id="phy", name="Physics")
		self.lesson = SubjectLesson.objects.create(subject=self.subject, title="Motion")

	def _add_video(self, title):
		return self.client.post('/api-v1/videos/', {
			"lesson": str(self.lesson.pk), "title": title, "youtube_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
		}, format='json')

	def test_admin_adds_videos_in_append_order(self):
		self.client.force_authenticate(user=self.admin)
		first = self._add_video("One")
		second = self._add_video("Two")
		self.assertEqual(first.status_code, 201)
		self.assertEqual(first.data["position"], 0)
		self.assertEqual(second.data["position"], 1)
		self.assertEqual(first.data["subject"], "phy")
		self.assertEqual(first.data["thumbnail_url"], "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg")

	def test_invalid_youtube_url_rejected(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post('/api-v1/videos/', {
			"lesson": str(self.lesson.pk), "title": "Bad", "youtube_url": "https://vimeo.com/1",
		}, format='json')
		self.assertEqual(resp.status_code, 400)

	def test_user_cannot_write_content(self):
		self.client.force_authenticate(user=self.user)
		resp = self.client.post('/api-v1/subjects/', {"id": "bio", "name": "Biology"}, format='json')
		self.assertEqual(resp.status_code, 403)
		self.assertEqual(self._add_video("Nope").status_code, 403)

	def test_admin_creates_subject(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post('/api-v1/subjects/', {"id": "bio", "name": "Biology"}, format='json')
		self.assertEqual(resp.status_code, 201)
		self.assertEqual(Subject.objects.get(id="bio").created_by, self.admin)

	def test_moving_lesson_carries_subject_to_videos_requests_and_grants(self):
		Subject.objects.create(id="chem", name="Chemistry")
		video = LessonVideo.objects.create(lesson=self.lesson, title="Intro", youtube_url="https://youtu.be/dQw4w9WgXcQ", position=0)
		req = LessonRequest.objects.create(user=self.user, lesson=self.lesson)
		grant = UserLessonAccess.objects.create(user=self.user, lesson=self.lesson, granted_at=timezone.now(), granted_by=self.admin)
		self.client.force_authenticate(user=self.admin)
		resp = self.client.patch(f'/api-v1/lessons/{self.lesson.pk}/', {"subject": "chem"}, format='json')
		self.assertEqual(resp.status_code, 200)
		for obj in (self.lesson, video, req, grant):
			obj.refresh_from_db()
			self.assertEqual(obj.subject_id, "chem")
		resp = self.client.get('/api-v1/videos/', {"subject": "chem"})
		self.assertEqual([v["id"] for v in resp.data], [str(video.pk)])

	def test_move_and_reorder_endpoints(self):
		self.client.force_authenticate(user=self.admin)
		ids = [self._add_video(t).data["id"] for t in ("A", "B", "C")]
		resp = self.client.post(f'/api-v1/videos/{ids[2]}/move/', {"direction": "up"}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual([v["title"] for v in resp.data], ["A", "C", "B"])
		resp = self.client.post(f'/api-v1/videos/{ids[0]}/move/', {"direction": "up"}, format='json')
		self.assertEqual([v["title"] for v in resp.data], ["A", "C", "B"])
		resp = self.client.post('/api-v1/videos/reorder/', {"lesson": str(self.lesson.pk), "video_ids": [ids[1], ids[0], ids[2]]}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual([v["position"] for v in resp.data], [0, 1, 2])
		self.assertEqual([v["title"] for v in resp.data], ["B", "A", "C"])
		resp = self.client.post('/api-v1/videos/reorder/', {"lesson": str(self.lesson.pk), "video_ids": ids[:2]}, format='json')
		self.assertEqual(resp.status_code, 400)

	def test_delete_video_renumbers(self):
		self.client.force_authenticate(user=self.admin)
		ids = [self._add_video(t).data["id"] for t in ("A", "B", "C")]
		self.assertEqual(self.client.delete(f'/api-v1/videos/{ids[0]}/').status_code, 204)
		positions = list(LessonVideo.objects.filter(lesson=self.lesson).order_by('position').values_list('position', 'title'))
		self.assertEqual(positions, [(0, "B"), (1, "C")])

	def test_feed_and_videos_gated_by_grant(self):
		LessonVideo.objects.create(lesson=self.lesson, subject=self.subject, title="Intro", youtube_url="https://youtu.be/dQw4w9WgXcQ")
		self.client.force_authenticate(user=self.user)

		feed = self.client.get('/api-v1/feed/')
		self.assertEqual(feed.status_code, 200)
		physics = next(s for s in feed.data if s["id"] == "phy")
		self.assertEqual(physics["lessons"], [])
		self.assertEqual(self.client.get('/api-v1/videos/').data, [])
		self.assertEqual(self.client.get(f'/api-v1/lessons/{self.lesson.pk}/videos/').status_code, 403)
		lessons = self.client.get('/api-v1/lessons/?subject=phy').data
		self.assertFalse(lessons[0]["has_access"])

		UserLessonAccess.objects.create(user=self.user, lesson=self.lesson, subject=self.subject, granted_at=timezone.now())
		feed = self.client.get('/api-v1/feed/')
		physics = next(s for s in feed.data if s["id"] == "phy")
		self.assertEqual(physics["lesson_count"], 1)
		self.assertEqual(physics["lessons"][0]["video_count"], 1)
		self.assertEqual(len(self.client.get('/api-v1/videos/').data), 1)
		self.assertTrue(self.client.get('/api-v1/lessons/?subject=phy').data[0]["has_access"])

	def test_admin_feed_sees_everything(self):
		self.client.force_authenticate(user=self.admin)
		feed = self.client.get('/api-v1/feed/')
		physics = next(s for s in feed.data if s["id"] == "phy")
		self.assertEqual(physics["lesson_count"], 1)

	def test_app_text_map_and_bulk(self):
		cache.clear()
		self.client.force_authenticate(user=self.user)
		resp = self.client.get('/api-v1/app-texts/map/')
		self.assertEqual(resp.status_code, 200)
		self.assertIn("hero_title", resp.data)
		self.assertEqual(self.client.post('/api-v1/app-texts/bulk/', {"texts": {"hero_title": "x"}}, format='json').status_code, 403)
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post('/api-v1/app-texts/bulk/', {"texts": {"hero_title": "Hello"}}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.client.force_authenticate(user=self.user)
		self.assertEqual(self.client.get('/api-v1/app-texts/map/').data["hero_title"], "Hello")


class LessonRequestApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()
		self.other = make_user(email="other@example.com", name="Other")
		subject = Subject.objects.create(id="phy", name="Physics")
		self.lesson = SubjectLesson.objects.create(subject=subject, title="Motion")

	def _submit(self, user):
		self.client.force_authenticate(user=user)
		return self.client.post('/api-v1/lesson-requests/', {"lesson": str(self.lesson.pk), "message": "please"}, format='json')

	def test_submit_then_duplicate_conflicts(self):
		resp = self._submit(self.user)
		self.assertEqual(resp.status_code, 201)
		self.assertEqual(resp.data["status"], RequestStatus.PENDING.value)
		self.assertEqual(self._submit(self.user).status_code, 409)

	def test_users_only_see_own_requests(self):
		self._submit(self.user)
		self._submit(self.other)
		self.client.force_authenticate(user=self.user)
		resp = self.client.get('/api-v1/lesson-requests/')
		self.assertEqual(len(resp.data), 1)
		self.client.force_authenticate(user=self.admin)
		resp = self.client.get('/api-v1/lesson-requests/?status=pending')
		self.assertEqual(len(resp.data), 2)

	def test_user_cannot_approve(self):
		req_id = self._submit(self.user).data["id"]
		resp = self.client.post(f'/api-v1/lesson-requests/{req_id}/approve/', {}, format='json')
		self.assertEqual(resp.status_code, 403)

	def test_approve_with_duration_creates_grant(self):
		req_id = self._submit(self.user).data["id"]
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post(f'/api-v1/lesson-requests/{req_id}/approve/', {"duration_days": 30, "admin_notes": "ok"}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual(resp.data["status"], RequestStatus.APPROVED.value)
		grant = UserLessonAccess.objects.get(user=self.user, lesson=self.lesson)
		self.assertGreater(grant.expires_at, timezone.now() + timedelta(days=29))
		self.assertTrue(Notification.objects.filter(user=self.user, type=NotificationType.LESSON_ACCESS.value).exists())
		# Second review is a conflict
		resp = self.client.post(f'/api-v1/lesson-requests/{req_id}/reject/', {}, format='json')
		self.assertEqual(resp.status_code, 409)

	def test_approve_with_past_expiry_is_bad_request(self):
		req_id = self._submit(self.user).data["id"]
		self.client.force_authenticate(user=self.admin)
		past = (timezone.now() - timedelta(days=1)).isoformat()
		resp = self.client.post(f'/api-v1/lesson-requests/{req_id}/approve/', {"expires_at": past}, format='json')
		self.assertEqual(resp.status_code, 400)
		self.assertEqual(LessonRequest.objects.get(pk=req_id).status, RequestStatus.PENDING.value)

	def test_reject_keeps_grants_untouched(self):
		req_id = self._submit(self.user).data["id"]
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post(f'/api-v1/lesson-requests/{req_id}/reject/', {"admin_notes": "later"}, format='json')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual(resp.data["admin_notes"], "later")
		self.assertFalse(UserLessonAccess.objects.exists())

	def test_admin_grant_check_and_revoke(self):
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post('/api-v1/lesson-access/grant/', {"user": str(self.user.pk), "lesson": str(self.lesson.pk)}, format='json')
		self.assertEqual(resp.status_code, 201)
		grant_id = resp.data["id"]

		self.client.force_authenticate(user=self.user)
		resp = self.client.get(f'/api-v1/lesson-access/check/?lesson={self.lesson.pk}')
		self.assertTrue(resp.data["has_access"])
		self.assertEqual(self.client.delete(f'/api-v1/lesson-access/{grant_id}/').status_code, 403)

		self.client.force_authenticate(user=self.admin)
		self.assertEqual(self.client.delete(f'/api-v1/lesson-access/{grant_id}/').status_code, 204)
		self.client.force_authenticate(user=self.user)
		resp = self.client.get(f'/api-v1/lesson-access/check/?lesson={self.lesson.pk}')
		self.assertFalse(resp.data["has_access"])


QUESTIONS = [
	{"id": "q1", "question": "2 + 2?", "options": ["3", "4"], "correct_answer": 1},
	{"id": "q2", "question": "3 + 3?", "options": ["6", "7", "8"], "correct_answer": 0},
]


class QuizApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()

	def _create_quiz(self, **extra):
		self.client.force_authenticate(user=self.admin)
		payload = {"title": "Arithmetic", "questions": QUESTIONS, "time_limit": 1, "passing_score": 50}
		payload.update(extra)
		return self.client.post('/api-v1/quizzes/', payload, format='json')

	def test_admin_creates_quiz_with_validation(self):
		resp = self._create_quiz()
		self.assertEqual(resp.status_code, 201)
		self.assertEqual(resp.data["question_count"], 2)
		self.assertEqual(resp.data["questions"][0]["correct_answer"], 1)
		bad = self._create_quiz(questions=[{"id": "x", "question": "?", "options": ["only"], "correct_answer": 0}])
		self.assertEqual(bad.status_code, 400)

	def test_learner_does_not_see_answers(self):
		quiz_id = self._create_quiz().data["id"]
		self.client.force_authenticate(user=self.user)
		resp = self.client.get(f'/api-v1/quizzes/{quiz_id}/')
		self.assertEqual(resp.status_code, 200)
		self.assertNotIn("correct_answer", resp.data["questions"][0])

	def test_learner_cannot_create_quiz(self):
		self.client.force_authenticate(user=self.user)
		resp = self.client.post('/api-v1/quizzes/', {"title": "x", "questions": QUESTIONS}, format='json')
		self.assertEqual(resp.status_code, 403)

	def test_submit_scores_and_clamps_time(self):
		quiz_id = self._create_quiz().data["id"]
		self.client.force_authenticate(user=self.user)
		resp = self.client.post(f'/api-v1/quizzes/{quiz_id}/submit/', {"answers": {"q1": 1, "q2": 2}, "time_spent": 999}, format='json')
		self.assertEqual(resp.status_code, 201)
		self.assertEqual(resp.data["score"], 1)
		self.assertEqual(resp.data["total_points"], 2)
		self.assertEqual(resp.data["percentage"], 50)
		self.assertTrue(resp.data["passed"])
		self.assertTrue(resp.data["timed_out"])
		self.assertEqual(resp.data["time_spent"], 60)
		self.assertEqual(Notification.objects.filter(user=self.user, type=NotificationType.QUIZ_RESULT.value).count(), 1)

	def test_submit_unknown_question_is_bad_request(self):
		quiz_id = self._create_quiz().data["id"]
		self.client.force_authenticate(user=self.user)
		resp = self.client.post(f'/api-v1/quizzes/{quiz_id}/submit/', {"answers": {"zzz": 0}}, format='json')
		self.assertEqual(resp.status_code, 400)
		self.assertEqual(QuizAttempt.objects.count(), 0)

	def test_attempts_scoped_to_owner_and_stats(self):
		quiz_id = self._create_quiz().data["id"]
		other = make_user(email="other@example.com", name="Other")
		for learner in (self.user, other):
			self.client.force_authenticate(user=learner)
			self.client.post(f'/api-v1/quizzes/{quiz_id}/submit/', {"answers": {"q1": 1}}, format='json')
		self.client.force_authenticate(user=self.user)
		self.assertEqual(len(self.client.get('/api-v1/quiz-attempts/').data), 1)
		self.assertEqual(self.client.get(f'/api-v1/quizzes/{quiz_id}/stats/').status_code, 403)
		self.client.force_authenticate(user=self.admin)
		self.assertEqual(len(self.client.get('/api-v1/quiz-attempts/').data), 2)
		stats = self.client.get(f'/api-v1/quizzes/{quiz_id}/stats/').data
		self.assertEqual(stats["attempts"], 2)
		self.assertEqual(stats["pass_rate"], 100.0)

	def test_question_image_rejects_non_images(self):
		self.client.force_authenticate(user=self.admin)
		upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
		resp = self.client.post('/api-v1/question-images/', {"image": upload}, format='multipart')
		self.assertEqual(resp.status_code, 400)

	@override_settings(QUESTION_IMAGE_MAX_BYTES=10)
	def test_question_image_size_limit(self):
		gif = (
			b'GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00\x00,'
			b'\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;'
		)
		self.client.force_authenticate(user=self.admin)
		upload = SimpleUploadedFile('dot.gif', gif, content_type='image/gif')
		resp = self.client.post('/api-v1/question-images/', {"image": upload}, format='multipart')
		self.assertEqual(resp.status_code, 400)


class NotificationApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()
		self.other = make_user(email="other@example.com", name="Other")

	def test_toasts_unread_count_and_mark_read(self):
		for i in range(4):
			Notification.objects.create(user=self.user, type=NotificationType.REMINDER.value, title=f"n{i}", message="m")
		Notification.objects.create(user=self.other, type=NotificationType.REMINDER.value, title="theirs", message="m")
		self.client.force_authenticate(user=self.user)
		self.assertEqual(len(self.client.get('/api-v1/notifications/toasts/').data), 3)
		self.assertEqual(self.client.get('/api-v1/notifications/unread-count/').data["unread"], 4)

		first = self.client.get('/api-v1/notifications/').data[0]
		resp = self.client.post(f'/api-v1/notifications/{first["id"]}/mark-read/')
		self.assertTrue(resp.data["read_status"])
		self.assertEqual(len(self.client.get('/api-v1/notifications/?read_status=false').data), 3)

		resp = self.client.post('/api-v1/notifications/mark-all-read/')
		self.assertEqual(resp.data["updated"], 3)
		self.assertEqual(Notification.objects.filter(user=self.other, read_status=False).count(), 1)

	def test_cannot_touch_other_users_notifications(self):
		theirs = Notification.objects.create(user=self.other, type=NotificationType.REMINDER.value, title="x", message="m")
		self.client.force_authenticate(user=self.user)
		self.assertEqual(self.client.post(f'/api-v1/notifications/{theirs.pk}/mark-read/').status_code, 404)

	def test_admin_create_and_broadcast(self):
		self.client.force_authenticate(user=self.user)
		self.assertEqual(self.client.post('/api-v1/notifications/broadcast/', {"title": "t", "message": "m"}, format='json').status_code, 403)
		self.client.force_authenticate(user=self.admin)
		resp = self.client.post('/api-v1/notifications/', {"user": str(self.user.pk), "title": "Hi", "message": "There"}, format='json')
		self.assertEqual(resp.status_code, 201)
		resp = self.client.post('/api-v1/notifications/broadcast/', {"title": "Update", "message": "New lessons"}, format='json')
		self.assertEqual(resp.status_code, 201)
		self.assertEqual(resp.data["sent"], 2)
		self.assertFalse(Notification.objects.filter(user=self.admin).exists())


class AdminDashboardTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_admin()
		self.user = make_user()

	def test_counts(self):
		subject = Subject.objects.create(id="phy", name="Physics")
		lesson = SubjectLesson.objects.create(subject=subject, title="Motion")
		LessonRequest.objects.create(user=self.user, lesson=lesson)
		Quiz.objects.create(title="Q")
		self.client.force_authenticate(user=self.admin)
		resp = self.client.get('/api-v1/admin/dashboard/')
		self.assertEqual(resp.status_code, 200)
		self.assertEqual(resp.data["users"], 2)
		self.assertEqual(resp.data["admins"], 1)
		self.assertEqual(resp.data["lessons"], 1)
		self.assertEqual(resp.data["pending_requests"], 1)
		self.assertEqual(resp.data["quizzes"], 1)

	def test_learner_forbidden(self):
		self.client.force_authenticate(user=self.user)
		self.assertEqual(self.client.get('/api-v1/admin/dashboard/').status_code, 403)
