from django.core.cache import cache
from django.test import SimpleTestCase, TestCase

from accounts.models import User
from quizbank.sysutils.constants import UserRole

from .models import Subject, SubjectLesson, LessonVideo, AppText
from .youtube import extract_video_id, thumbnail_url_for, embed_url_for
from . import services, texts


class YouTubeHelperTests(SimpleTestCase):
	def test_watch_url(self):
		self.assertEqual(extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ"), "dQw4w9WgXcQ")

	def test_watch_url_with_extra_params(self):
		self.assertEqual(extract_video_id("https://www.youtube.com/watch?list=PL1&v=dQw4w9WgXcQ&t=30"), "dQw4w9WgXcQ")

	def test_short_link_live_and_embed(self):
		self.assertEqual(extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=10"), "dQw4w9WgXcQ")
		self.assertEqual(extract_video_id("https://www.youtube.com/live/abcDEF12345?si=x"), "abcDEF12345")
		self.assertEqual(extract_video_id("https://www.youtube.com/embed/abcDEF12345"), "abcDEF12345")

	def test_bare_id(self):
		self.assertEqual(extract_video_id("abcDEF12345"), "abcDEF12345")

	def test_unrecognised(self):
		self.assertIsNone(extract_video_id("https://vimeo.com/123"))
		self.assertIsNone(extract_video_id(""))
		self.assertIsNone(thumbnail_url_for("not a url"))

	def test_thumbnail_and_embed(self):
		url = "https://youtu.be/dQw4w9WgXcQ"
		self.assertEqual(thumbnail_url_for(url), "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg")
		self.assertTrue(embed_url_for(url).startswith("https://www.youtube.com/embed/dQw4w9WgXcQ?"))


class VideoOrderingTests(TestCase):
	def setUp(self):
		self.subject = Subject.objects.create(id="phy", name="Physics")
		self.lesson = SubjectLesson.objects.create(subject=self.subject, title="Motion")
		self.videos = [
			LessonVideo.objects.create(
				lesson=self.lesson,
				subject=self.subject,
				title=f"Part {i}",
				youtube_url="https://youtu.be/dQw4w9WgXcQ",
				position=i,
			)
			for i in range(3)
		]

	def _titles(self):
		return list(LessonVideo.objects.filter(lesson=self.lesson).order_by('position').values_list('title', flat=True))

	def _positions(self):
		return list(LessonVideo.objects.filter(lesson=self.lesson).order_by('position').values_list('position', flat=True))

	def test_next_position_is_video_count(self):
		self.assertEqual(services.next_position(self.lesson), 3)

	def test_video_subject_follows_lesson(self):
		other = Subject.objects.create(id="chem", name="Chemistry")
		video = LessonVideo.objects.create(lesson=self.lesson, subject=other, title="x", youtube_url="https://youtu.be/dQw4w9WgXcQ")
		self.assertEqual(video.subject_id, "phy")

	def test_move_up_swaps_neighbours(self):
		services.move_video(self.videos[2], 'up')
		self.assertEqual(self._titles(), ["Part 0", "Part 2", "Part 1"])
		self.assertEqual(self._positions(), [0, 1, 2])

	def test_move_past_either_end_is_noop(self):
		services.move_video(self.videos[0], 'up')
		services.move_video(self.videos[2], 'down')
		self.assertEqual(self._titles(), ["Part 0", "Part 1", "Part 2"])

	def test_move_rewrites_gapped_positions(self):
		LessonVideo.objects.filter(pk=self.videos[2].pk).update(position=9)
		services.move_video(self.videos[0], 'down')
		self.assertEqual(self._titles(), ["Part 1", "Part 0", "Part 2"])
		self.assertEqual(self._positions(), [0, 1, 2])

	def test_reorder_requires_exact_set(self):
		ids = [v.pk for v in self.videos]
		with self.assertRaises(services.VideoOrderError):
			services.reorder_videos(self.lesson, ids[:2])
		with self.assertRaises(services.VideoOrderError):
			services.reorder_videos(self.lesson, [ids[0], ids[0], ids[1]])
		services.reorder_videos(self.lesson, [ids[2], ids[0], ids[1]])
		self.assertEqual(self._titles(), ["Part 2", "Part 0", "Part 1"])

	def test_delete_renumbers(self):
		services.delete_video(self.videos[0])
		self.assertEqual(self._titles(), ["Part 1", "Part 2"])
		self.assertEqual(self._positions(), [0, 1])


class AppTextCacheTests(TestCase):
	def setUp(self):
		cache.clear()
		self.admin = User.objects.create_user(email="admin@example.com", name="Admin", password="secret1", role=UserRole.ADMIN.value)

	def test_seeded_texts_present(self):
		data = texts.text_map()
		self.assertIn("hero_title", data)

	def test_upsert_invalidates_cache(self):
		texts.text_map()
		AppText.objects.filter(key="hero_title").update(value="stale write")
		# Cached value still served until invalidated
		self.assertNotEqual(texts.text_map()["hero_title"], "stale write")
		result = texts.upsert_texts({"hero_title": "Welcome", "footer": "Bye"}, user=self.admin)
		self.assertEqual(result["hero_title"], "Welcome")
		self.assertEqual(texts.text_map()["footer"], "Bye")
		self.assertEqual(AppText.objects.get(key="footer").created_by, self.admin)
