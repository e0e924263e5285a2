"""
Caching utilities for Daily Priority.

Wraps Django's cache framework. Per-user data lives in versioned namespaces:
bumping a namespace version makes every key built under the old version
unreachable, so one write invalidates all pages of a paginated list at once.
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging
import time

from core.utils.constants import CACHE_TIMEOUTS

logger = logging.getLogger(__name__)

# Namespaces touched by any task mutation
TASK_NAMESPACES = ('tasks', 'stats', 'analytics')


def make_cache_key(prefix, *args, **kwargs):
    """
    Generate a consistent cache key from function arguments.

    Keys longer than 200 characters are hashed so they stay within
    memcached-style key limits.
    """
    key_parts = [prefix]

    for arg in args:
        if hasattr(arg, 'pk'):
            key_parts.append(str(arg.pk))
        else:
            key_parts.append(str(arg))

    for k, v in sorted(kwargs.items()):
        key_parts.append(f"{k}={v}")

    key_string = ':'.join(key_parts)
    if len(key_string) > 200:
        key_hash = hashlib.md5(key_string.encode()).hexdigest()
        return f"{prefix}:{key_hash}"

    return key_string


def cache_result(timeout=300, key_prefix='default'):
    """
    Decorator to cache function results using Django's cache framework.

    Usage:
        @cache_result(timeout=60, key_prefix='prayer_times')
        def fetch(lat, lon):
            ...

    ``None`` results are not cached.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            result = cache.get(cache_key)
            if result is not None:
                logger.debug(f"Cache HIT: {cache_key}")
                return result

            logger.debug(f"Cache MISS: {cache_key}")
            result = func(*args, **kwargs)

            if result is not None:
                cache.set(cache_key, result, timeout)

            return result

        wrapper.invalidate = lambda *args, **kwargs: cache.delete(
            make_cache_key(key_prefix, *args, **kwargs)
        )

        return wrapper
    return decorator


# ============================================================================
# PER-USER NAMESPACES
# ============================================================================

def _version_key(namespace, user_id):
    return f"v:{namespace}:{user_id}"


def _fresh_version():
    # Must not repeat any version handed out before the counter was lost
    return time.time_ns()


def get_namespace_version(namespace, user_id) -> int:
    key = _version_key(namespace, user_id)
    version = cache.get(key)
    if version is None:
        # No expiry; add() lets concurrent readers settle on one value
        cache.add(key, _fresh_version(), None)
        version = cache.get(key)
    return version


def user_cache_key(namespace, user_id, *parts):
    """Key for per-user data, scoped to the namespace's current version."""
    version = get_namespace_version(namespace, user_id)
    return make_cache_key(namespace, user_id, f"v{version}", *parts)


def get_user_cached(namespace, user_id, *parts):
    """Cached value or ``None`` on miss."""
    return cache.get(user_cache_key(namespace, user_id, *parts))


def set_user_cached(namespace, user_id, value, *parts, timeout=None):
    if timeout is None:
        timeout = CACHE_TIMEOUTS.get(namespace, 300)
    cache.set(user_cache_key(namespace, user_id, *parts), value, timeout)


def invalidate_user_cache(user_id, *namespaces):
    """
    Drop every cached entry for the given user namespaces.

    Call this after any write that changes data the namespaces are built
    from. With no namespaces, the task-derived ones are invalidated.
    """
    namespaces = namespaces or TASK_NAMESPACES
    for namespace in namespaces:
        key = _version_key(namespace, user_id)
        try:
            cache.incr(key)
        except ValueError:
            # Counter missing (first write or evicted)
            cache.set(key, _fresh_version(), None)

    logger.debug(f"Invalidated cache namespaces {list(namespaces)} for user {user_id}")
