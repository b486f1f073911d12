"""
Celery worker signal handlers.

Connected from SchedlockDjangoConfig.ready() when
SCHEDLOCK_UNLOCK_ON_WORKER_SHUTDOWN is on.
"""
import logging

from celery.signals import worker_shutdown

from schedlock.adapters.django.services.lock import unlock_tracked_locks

logger = logging.getLogger(__name__)

DISPATCH_UID = "schedlock_release_locks_on_worker_shutdown"


def release_locks_on_worker_shutdown(sender=None, **kwargs):
    """Release every lock still held by this worker process."""
    try:
        released = unlock_tracked_locks()
    except Exception as exc:
        logger.error(f"Failed to release tracked locks on shutdown: {exc}")
        return
    if released:
        logger.info(f"Released {released} locks on worker shutdown")


def connect_signals():
    worker_shutdown.connect(
        release_locks_on_worker_shutdown,
        dispatch_uid=DISPATCH_UID,
        weak=False,
    )
