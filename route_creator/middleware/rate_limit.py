"""Rate limiting middleware using a fixed window per client address."""
import logging
import math
import time
from typing import Callable, Optional

from fastapi import Request

from route_creator.core.config import settings
from route_creator.core.exceptions import RateLimitError
from route_creator.db.transient import TransientStore, get_transient_store
from route_creator.middleware.base import Middleware, MiddlewareResult, error_response

logger = logging.getLogger(__name__)


class RateLimiter(Middleware):
    """Allow at most ``max_requests_per_minute`` requests per address and window.

    The counter lives in a transient store keyed by client address. Reading
    and writing it are separate calls, so concurrent requests from one address
    can undercount.
    """

    def __init__(
        self,
        max_requests_per_minute: Optional[int] = None,
        store: Optional[TransientStore] = None,
        window: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = (
            settings.rate_limit_requests
            if max_requests_per_minute is None
            else max_requests_per_minute
        )
        self.window = settings.rate_limit_window if window is None else window
        self.store = store if store is not None else get_transient_store()
        self._clock = clock

    @staticmethod
    def cache_key(request: Request) -> str:
        address = request.client.host if request.client else "unknown"
        return f"rate_limiter:{address}"

    def handle(self, request: Request) -> MiddlewareResult:
        key = self.cache_key(request)
        now = self._clock()
        cached = self.store.get(key)

        if cached is None or cached["timestamp"] + self.window <= now:
            self.store.set(key, {"count": 1, "timestamp": now}, self.window)
            return request

        if cached["count"] >= self.max_requests:
            retry_after = max(1, math.ceil(cached["timestamp"] + self.window - now))
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds window",
                key,
                cached["count"],
                self.window,
            )
            return error_response(
                RateLimitError(),
                headers={
                    "X-RateLimit-Limit": str(self.max_requests),
                    "Retry-After": str(retry_after),
                },
            )

        cached["count"] += 1
        self.store.set(key, cached, self.window)
        return request
