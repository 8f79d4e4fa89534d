"""
Fixed-window rate limiting with an injectable counter store.

Stores:
  - MemoryRateLimitStore → per-process dict guarded by one lock (tests, local dev)
  - RedisRateLimitStore  → INCR + PEXPIRE, shared by every app instance

A window starts on the first hit for a key and resets lazily: the first hit
after the window has expired starts a new one.

Usage:
    limiter = get_limiter('generate')
    result = limiter.check(client_identifier(request))
    if not result.success:
        ...429...
"""
import logging
import threading
import time
from dataclasses import dataclass
from functools import wraps
from datetime import datetime, timezone
from typing import Callable, Dict, Tuple

from app.config import (
    RATE_LIMIT_STORAGE,
    GENERATE_RATE_LIMIT, GENERATE_RATE_WINDOW,
    RESULTS_RATE_LIMIT, RESULTS_RATE_WINDOW,
)

logger = logging.getLogger('services.rate_limiter')


@dataclass
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset_time: float  # epoch seconds

    @property
    def reset_iso(self) -> str:
        return datetime.fromtimestamp(self.reset_time, tz=timezone.utc).isoformat()

    def headers(self) -> Dict[str, str]:
        return {
            'X-RateLimit-Limit': str(self.limit),
            'X-RateLimit-Remaining': str(self.remaining),
            'X-RateLimit-Reset': self.reset_iso,
        }


class MemoryRateLimitStore:
    """In-process counters. Not shared across processes; reset on restart."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: Dict[str, Tuple[int, float]] = {}

    def hit(self, key: str, window_seconds: int) -> Tuple[int, float]:
        """Count one request. Returns (count in current window, window reset time)."""
        with self._lock:
            now = self._clock()
            count, reset_time = self._counters.get(key, (0, 0.0))
            if now >= reset_time:
                count, reset_time = 0, now + window_seconds
            count += 1
            self._counters[key] = (count, reset_time)
            return count, reset_time

    def reset(self):
        with self._lock:
            self._counters.clear()


class RedisRateLimitStore:
    """Redis counters shared by all instances. Fails open if Redis is unavailable."""

    PREFIX = 'ratelimit'

    def __init__(self, redis_client):
        self.redis = redis_client

    def hit(self, key: str, window_seconds: int) -> Tuple[int, float]:
        redis_key = f'{self.PREFIX}:{key}'
        window_ms = window_seconds * 1000
        try:
            pipe = self.redis.pipeline()
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            count, ttl_ms = pipe.execute()
            if ttl_ms is None or ttl_ms < 0:
                # First hit in this window (or key lost its expiry)
                self.redis.pexpire(redis_key, window_ms)
                ttl_ms = window_ms
            return int(count), time.time() + ttl_ms / 1000.0
        except Exception as e:
            logger.warning("Rate limit store unavailable, allowing request: %s", e)
            return 0, time.time() + window_seconds


class RateLimiter:
    def __init__(self, name: str, store, max_requests: int, window_seconds: int):
        self.name = name
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def check(self, key: str) -> RateLimitResult:
        count, reset_time = self.store.hit(f'{self.name}:{key}', self.window_seconds)
        if count > self.max_requests:
            logger.info("Rate limit '%s' exceeded for %s (%d/%d)", self.name, key, count, self.max_requests)
            return RateLimitResult(False, self.max_requests, 0, reset_time)
        return RateLimitResult(True, self.max_requests, max(0, self.max_requests - count), reset_time)


def client_identifier(request) -> str:
    """First X-Forwarded-For address, else the socket peer address."""
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    return request.remote_addr or 'unknown'


# ── Global registry ───────────────────────────────────────────────────────

_registry = {}


def build_store(storage: str = None):
    """Create the counter store selected by RATE_LIMIT_STORAGE."""
    storage = (storage or RATE_LIMIT_STORAGE).lower()
    if storage == 'memory':
        return MemoryRateLimitStore()
    from app.extensions import redis_client
    return RedisRateLimitStore(redis_client)


def init_limiters(store) -> Dict[str, RateLimiter]:
    """(Re)build the named limiters on a shared store."""
    limiters = {
        'generate': RateLimiter('generate', store, GENERATE_RATE_LIMIT, GENERATE_RATE_WINDOW),
        'results': RateLimiter('results', store, RESULTS_RATE_LIMIT, RESULTS_RATE_WINDOW),
    }
    _registry.update(limiters)
    return limiters


def get_limiter(name: str) -> RateLimiter:
    if name not in _registry:
        init_limiters(build_store())
    return _registry[name]


def rate_limited(name: str):
    """Flask view decorator: 429 with X-RateLimit-* headers once the named limiter rejects."""
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            from flask import request, jsonify
            result = get_limiter(name).check(client_identifier(request))
            if not result.success:
                resp = jsonify({'error': 'Too many requests. Please try again later.'})
                resp.status_code = 429
                resp.headers.update(result.headers())
                return resp
            return view(*args, **kwargs)
        return wrapper
    return decorator
