"""Ordered middleware chain with group support."""
import inspect
import itertools
import logging
from typing import Any, Callable, Iterable, List, Tuple

from fastapi import Request, Response
from starlette.concurrency import run_in_threadpool

from route_creator.middleware.base import (
    MiddlewareCallable,
    MiddlewareResult,
    as_middleware,
    is_async_callable,
    middleware_name,
)

logger = logging.getLogger(__name__)


class MiddlewarePipeline:
    """Global middleware list plus the transient list of an open group.

    Middlewares are declared once at startup. ``apply`` only reads the lists,
    so it can run for concurrent requests as long as nothing is declared
    while traffic is served.
    """

    def __init__(self, middlewares: Iterable[Any] = ()):
        self._middlewares: List[MiddlewareCallable] = []
        self._group: List[MiddlewareCallable] = []
        self._group_open = False
        for middleware in middlewares:
            self.add(middleware)

    def __len__(self) -> int:
        return len(self._middlewares)

    @property
    def middlewares(self) -> Tuple[MiddlewareCallable, ...]:
        return tuple(self._middlewares)

    @property
    def pending(self) -> Tuple[MiddlewareCallable, ...]:
        """Middlewares collected by the currently open group."""
        return tuple(self._group)

    @property
    def in_group(self) -> bool:
        return self._group_open

    def add(self, middleware: Any) -> MiddlewareCallable:
        """Append to the open group, or to the global list outside a group."""
        adapted = as_middleware(middleware)
        if self._group_open:
            self._group.append(adapted)
        else:
            self._middlewares.append(adapted)
        logger.debug(
            "Added middleware %s (%s)",
            middleware_name(adapted),
            "group" if self._group_open else "global",
        )
        return adapted

    def group(self, body: Callable[[], Any]) -> None:
        """Run ``body`` and move every middleware it added to the global list.

        Groups do not nest: entering a group drops whatever an enclosing
        group had collected so far. If ``body`` raises, the collected
        middlewares are discarded and the error propagates.
        """
        if self._group_open and self._group:
            logger.warning(
                "Nested group discards %d pending middleware(s)", len(self._group)
            )
        self._group = []
        self._group_open = True
        try:
            body()
            collected = self._group
        finally:
            self._group = []
            self._group_open = False

        self._middlewares.extend(collected)
        logger.debug("Group added %d middleware(s)", len(collected))

    async def apply(
        self, request: Request, extra: Iterable[MiddlewareCallable] = ()
    ) -> MiddlewareResult:
        """Run the global chain, then ``extra``, until one returns a response.

        A middleware returning ``None`` leaves the request unchanged. Sync
        middlewares run in the threadpool.
        """
        for middleware in itertools.chain(self._middlewares, extra):
            if is_async_callable(middleware):
                result = middleware(request)
            else:
                result = await run_in_threadpool(middleware, request)
            if inspect.isawaitable(result):
                result = await result

            if isinstance(result, Response):
                logger.debug(
                    "%s stopped %s %s with status %d",
                    middleware_name(middleware),
                    request.method,
                    request.url.path,
                    result.status_code,
                )
                return result

            if result is not None:
                request = result

        return request
