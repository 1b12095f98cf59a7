"""Middleware contract shared by the pipeline and the bundled middlewares."""
from abc import ABC, abstractmethod
import inspect
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from route_creator.core.exceptions import RouteCreatorError

MiddlewareResult = Union[Request, Response]
MiddlewareCallable = Callable[
    [Request], Union[MiddlewareResult, Awaitable[MiddlewareResult]]
]


class Middleware(ABC):
    """Request interceptor.

    ``handle`` returns either the request (possibly modified) to continue the
    chain, or a response to stop it.
    """

    @abstractmethod
    def handle(self, request: Request) -> MiddlewareResult:
        ...

    def __call__(self, request: Request) -> MiddlewareResult:
        return self.handle(request)

    @property
    def name(self) -> str:
        return self.__class__.__name__


def as_middleware(candidate: Any) -> MiddlewareCallable:
    """Adapt a function or an object with a ``handle`` method to a middleware."""
    if isinstance(candidate, type):
        raise TypeError(
            f"Middleware must be an instance, got the class {candidate.__name__}"
        )

    if isinstance(candidate, Middleware):
        return candidate

    handle = getattr(candidate, "handle", None)
    if callable(handle):
        return handle

    if callable(candidate):
        return candidate

    raise TypeError(
        f"Middleware must be callable or expose handle(), got {type(candidate).__name__}"
    )


def is_async_callable(target: Any) -> bool:
    """True when calling ``target`` produces a coroutine."""
    if isinstance(target, Middleware):
        target = target.handle
    if inspect.iscoroutinefunction(target):
        return True
    return inspect.iscoroutinefunction(getattr(target, "__call__", None))


def middleware_name(middleware: Any) -> str:
    name = getattr(middleware, "name", None)
    if isinstance(name, str):
        return name
    owner = getattr(middleware, "__self__", None)
    if owner is not None:
        return type(owner).__name__
    return getattr(middleware, "__qualname__", type(middleware).__name__)


def queue_response_headers(request: Request, headers: Mapping[str, str]) -> None:
    """Remember headers to set on whatever response this request produces."""
    pending: Optional[Dict[str, str]] = getattr(request.state, "response_headers", None)
    if pending is None:
        pending = {}
        request.state.response_headers = pending
    pending.update(headers)


def queued_response_headers(request: Request) -> Dict[str, str]:
    return dict(getattr(request.state, "response_headers", None) or {})


def error_response(
    exc: RouteCreatorError, headers: Optional[Mapping[str, str]] = None
) -> JSONResponse:
    """Build the terminal response for a failed check."""
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=dict(headers) if headers else None,
    )
