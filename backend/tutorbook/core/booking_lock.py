"""
Per-tutor booking lock.

create_booking holds this lock across the check-then-insert-then-commit
sequence so that two requests for the same tutor are serialized. Two layers:

- an in-process threading.Lock per tutor (always taken), and
- a Redis SET NX EX key shared by every worker (when REDIS_URL is set).

Redis errors degrade to the in-process lock with a warning. Failing to
acquire either layer within the bounded wait yields ``False``.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Dict, Iterator, Optional

from redis import Redis
from redis.exceptions import RedisError

from tutorbook.core.config import settings
from tutorbook.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()

_LOCAL_LOCKS: Dict[str, threading.Lock] = {}
_LOCAL_LOCKS_GUARD = threading.Lock()

_POLL_INTERVAL_S = 0.05


def _lock_key(tutor_id: str) -> str:
    return f"tutor:{tutor_id}:booking:mutex"


def _namespaced_key(key: str) -> str:
    return f"{settings.lock_namespace}:lock:{key}"


def _local_lock(tutor_id: str) -> threading.Lock:
    with _LOCAL_LOCKS_GUARD:
        lock = _LOCAL_LOCKS.get(tutor_id)
        if lock is None:
            lock = threading.Lock()
            _LOCAL_LOCKS[tutor_id] = lock
        return lock


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS
    if not settings.redis_url:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            client.ping()
        except RedisError as exc:
            logger.warning("tutor_lock_redis_unavailable: %s", exc)
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def acquire_tutor_lock_redis(tutor_id: str, ttl_s: int, wait_s: float) -> bool:
    """
    Try to take the shared Redis lock for a tutor, polling until wait_s runs out.

    Returns True when the lock is held or when Redis is not usable
    (the in-process lock still serializes this worker).
    """
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_tutor_lock("acquire", "redis_unavailable")
        return True

    key = _namespaced_key(_lock_key(tutor_id))
    deadline = time.monotonic() + wait_s
    try:
        while True:
            if client.set(key, str(time.time()), nx=True, ex=ttl_s):
                prometheus_metrics.record_tutor_lock("acquire", "success")
                return True
            if time.monotonic() >= deadline:
                prometheus_metrics.record_tutor_lock("acquire", "blocked")
                return False
            time.sleep(_POLL_INTERVAL_S)
    except RedisError as exc:
        prometheus_metrics.record_tutor_lock("acquire", "error")
        logger.warning(
            "tutor_lock_redis_acquire_failed",
            extra={
                "tutor_id": tutor_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )
        return True


def release_tutor_lock_redis(tutor_id: str) -> None:
    client = _get_sync_redis()
    if client is None:
        return
    try:
        deleted = client.delete(_namespaced_key(_lock_key(tutor_id)))
        if deleted:
            prometheus_metrics.record_tutor_lock("release", "success")
        else:
            prometheus_metrics.record_tutor_lock("release", "not_found")
    except RedisError as exc:
        prometheus_metrics.record_tutor_lock("release", "error")
        logger.warning(
            "tutor_lock_redis_release_failed",
            extra={
                "tutor_id": tutor_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )


@contextmanager
def tutor_booking_lock(
    tutor_id: str,
    ttl_s: Optional[int] = None,
    wait_s: Optional[float] = None,
) -> Iterator[bool]:
    """
    Serialize bookings for one tutor.

    Yields True when the caller holds the lock, False when the bounded wait
    expired. Callers must not touch the ledger when False is yielded.
    """
    ttl = settings.booking_lock_ttl_seconds if ttl_s is None else ttl_s
    wait = settings.booking_lock_wait_seconds if wait_s is None else wait_s

    started = time.monotonic()
    local = _local_lock(tutor_id)
    if not local.acquire(timeout=wait):
        prometheus_metrics.record_tutor_lock("acquire", "local_timeout")
        logger.warning("tutor_lock_local_timeout", extra={"tutor_id": tutor_id})
        yield False
        return

    try:
        remaining = max(0.0, wait - (time.monotonic() - started))
        acquired = acquire_tutor_lock_redis(tutor_id, ttl_s=ttl, wait_s=remaining)
        try:
            yield acquired
        finally:
            if acquired:
                release_tutor_lock_redis(tutor_id)
    finally:
        local.release()
