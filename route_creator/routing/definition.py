"""Route definition handle returned by the verb helpers."""
import inspect
from typing import Any, Callable, Iterable, List, Tuple

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from route_creator.core.exceptions import RouteRegistrationError
from route_creator.middleware.base import (
    MiddlewareCallable,
    as_middleware,
    is_async_callable,
)
from route_creator.routing.patterns import to_host_path, translate_pattern


def _resolve_callback(callback: Any) -> Callable[[Request], Any]:
    if isinstance(callback, type):
        raise RouteRegistrationError(
            f"Route callback must be an instance, got the class {callback.__name__}"
        )
    handle = getattr(callback, "handle", None)
    if not inspect.isroutine(callback) and callable(handle):
        return handle
    if callable(callback):
        return callback
    raise RouteRegistrationError(
        f"Route callback must be callable, got {type(callback).__name__}"
    )


class RouteDefinition:
    """One declared route: endpoint, method, callback and its own middlewares."""

    def __init__(self, endpoint: str, method: str, callback: Any, namespace: str = ""):
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        self.endpoint = endpoint
        self.method = method.upper()
        self.callback = callback
        self.namespace = namespace.strip("/")

        prefix = f"/{self.namespace}" if self.namespace else ""
        self.path = prefix + to_host_path(endpoint)
        self.matcher = prefix + translate_pattern(endpoint)

        self._target = _resolve_callback(callback)
        self._is_async = is_async_callable(self._target)
        self._middlewares: List[MiddlewareCallable] = []

    def __repr__(self) -> str:
        return f"RouteDefinition({self.method} {self.path})"

    @property
    def name(self) -> str:
        return getattr(self._target, "__name__", type(self._target).__name__)

    @property
    def middlewares(self) -> Tuple[MiddlewareCallable, ...]:
        return tuple(self._middlewares)

    def middleware(self, middlewares: Iterable[Any]) -> "RouteDefinition":
        """Attach middlewares that run for this route only, after the global chain."""
        for middleware in middlewares:
            self._middlewares.append(as_middleware(middleware))
        return self

    async def invoke(self, request: Request) -> Any:
        """Call the route callback with the request."""
        if self._is_async:
            return await self._target(request)

        result = await run_in_threadpool(self._target, request)
        if inspect.isawaitable(result):
            result = await result
        return result
