from typing import Dict, Mapping

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from .models import AppText

CACHE_KEY = "app_texts:v1"


def _load() -> Dict[str, str]:
	return dict(AppText.objects.order_by('key').values_list('key', 'value'))


def text_map() -> Dict[str, str]:
	"""Every app text as ``{key: value}``, served from cache when warm."""
	cached = cache.get(CACHE_KEY)
	if cached is not None:
		return cached
	data = _load()
	cache.set(CACHE_KEY, data, timeout=getattr(settings, 'CACHE_DEFAULT_TIMEOUT', 300))
	return data


def invalidate() -> None:
	cache.delete(CACHE_KEY)


def upsert_texts(texts: Mapping[str, str], user=None) -> Dict[str, str]:
	with transaction.atomic():
		for key, value in texts.items():
			obj, created = AppText.objects.get_or_create(key=key, defaults={'value': value, 'created_by': user})
			if not created and obj.value != value:
				obj.value = value
				obj.save(update_fields=['value', 'updated_at'])
	invalidate()
	return text_map()
