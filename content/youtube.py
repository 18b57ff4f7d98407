"""Helpers for the YouTube URLs stored on lesson videos."""
import re

_PATTERNS = [
	re.compile(r'(?:youtube\.com/watch\?(?:[^#]*&)?v=|youtu\.be/)([^&\n?#/]+)'),
	re.compile(r'youtube\.com/live/([^&\n?#/]+)'),
	re.compile(r'youtube\.com/embed/([^&\n?#/]+)'),
	re.compile(r'youtube\.com/shorts/([^&\n?#/]+)'),
]
_BARE_ID = re.compile(r'^[A-Za-z0-9_-]{11}$')


def extract_video_id(url: str) -> str | None:
	"""Return the video id for a watch/short/live/embed URL or a bare id."""
	if not url:
		return None
	url = str(url).strip()
	for pattern in _PATTERNS:
		match = pattern.search(url)
		if match:
			return match.group(1)
	if _BARE_ID.match(url):
		return url
	return None


def thumbnail_url_for(url: str) -> str | None:
	video_id = extract_video_id(url)
	if not video_id:
		return None
	return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def embed_url_for(url: str) -> str | None:
	video_id = extract_video_id(url)
	if not video_id:
		return None
	return (
		f"https://www.youtube.com/embed/{video_id}"
		"?controls=1&rel=0&modestbranding=1&iv_load_policy=3&playsinline=1"
	)
