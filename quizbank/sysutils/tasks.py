import logging
import threading
from typing import Callable, Any

from django.conf import settings

logger = logging.getLogger(__name__)


def _run_safely(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Execute a function and log any exception instead of raising it.

    Notification e-mails go through here so a failing mail server never
    breaks the request that triggered them.
    """
    try:
        fn(*args, **kwargs)
    except Exception:
        logger.exception("Background task %s failed", getattr(fn, '__name__', fn))


def fire_and_forget(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run ``fn(*args, **kwargs)`` in a daemon thread and return immediately.

    Best-effort only: tasks may be lost if the process exits, and there are
    no retries. With ``BACKGROUND_TASKS_INLINE`` enabled (tests, management
    commands) the call runs synchronously in the current thread.
    """
    if getattr(settings, 'BACKGROUND_TASKS_INLINE', False):
        _run_safely(fn, *args, **kwargs)
        return
    thread = threading.Thread(
        target=_run_safely,
        args=(fn, *args),
        kwargs=kwargs,
        daemon=True,
    )
    thread.start()
