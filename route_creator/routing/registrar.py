"""Declare routes with readable patterns and bind them to a FastAPI app.

Routes are collected first and bound once, when the application starts::

    routes = ApiRouter()
    routes.add_middleware(Cors())
    routes.get("/books/{book_id}", show_book).middleware([ApiKeyAuthentication()])

    app = FastAPI(lifespan=routes.lifespan)
"""
import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional, Tuple, Union

from fastapi import APIRouter, FastAPI, Request, Response

from route_creator.core.config import settings
from route_creator.core.exceptions import RouteRegistrationError
from route_creator.middleware.base import MiddlewareCallable, queued_response_headers
from route_creator.routing.definition import RouteDefinition
from route_creator.routing.patterns import register_token_convertor
from route_creator.routing.pipeline import MiddlewarePipeline

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def _apply_headers(request: Request, response: Response, result: Any) -> Any:
    headers = queued_response_headers(request)
    if headers:
        target = result if isinstance(result, Response) else response
        target.headers.update(headers)
    return result


class ApiRouter:
    """Route table plus the middleware pipeline shared by its routes."""

    def __init__(
        self,
        pipeline: Optional[MiddlewarePipeline] = None,
        namespace: Optional[str] = None,
    ):
        self.pipeline = pipeline if pipeline is not None else MiddlewarePipeline()
        self.namespace = (namespace if namespace is not None else settings.api_namespace).strip("/")
        self._routes: List[RouteDefinition] = []
        self._bound = False

    @property
    def routes(self) -> Tuple[RouteDefinition, ...]:
        return tuple(self._routes)

    @property
    def is_bound(self) -> bool:
        return self._bound

    def register(self, method: str, endpoint: str, callback: Any) -> RouteDefinition:
        """Add a route to the table. It is bound to the app later by :meth:`bind`."""
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise RouteRegistrationError(f"Unsupported HTTP method: {method}")
        if self._bound:
            raise RouteRegistrationError(
                f"Cannot declare {method} {endpoint}: routes are already bound"
            )

        route = RouteDefinition(endpoint, method, callback, namespace=self.namespace)
        try:
            re.compile(route.matcher)
        except re.error as e:
            raise RouteRegistrationError(f"Invalid endpoint pattern {endpoint!r}: {e}") from e

        self._routes.append(route)
        logger.debug("Declared %s %s", method, route.path)
        return route

    def _declare(
        self,
        method: str,
        endpoint: str,
        callback: Any,
        middleware: Optional[Iterable[Any]],
    ) -> Union[RouteDefinition, Callable[[Any], Any]]:
        if callback is not None:
            route = self.register(method, endpoint, callback)
            if middleware:
                route.middleware(middleware)
            return route

        def decorator(func: Any) -> Any:
            route = self.register(method, endpoint, func)
            if middleware:
                route.middleware(middleware)
            return func

        return decorator

    def get(self, endpoint: str, callback: Any = None, *, middleware: Optional[Iterable[Any]] = None):
        return self._declare("GET", endpoint, callback, middleware)

    def post(self, endpoint: str, callback: Any = None, *, middleware: Optional[Iterable[Any]] = None):
        return self._declare("POST", endpoint, callback, middleware)

    def put(self, endpoint: str, callback: Any = None, *, middleware: Optional[Iterable[Any]] = None):
        return self._declare("PUT", endpoint, callback, middleware)

    def patch(self, endpoint: str, callback: Any = None, *, middleware: Optional[Iterable[Any]] = None):
        return self._declare("PATCH", endpoint, callback, middleware)

    def delete(self, endpoint: str, callback: Any = None, *, middleware: Optional[Iterable[Any]] = None):
        return self._declare("DELETE", endpoint, callback, middleware)

    def add_middleware(self, middleware: Any) -> MiddlewareCallable:
        return self.pipeline.add(middleware)

    def group(self, body: Callable[[], Any]) -> None:
        self.pipeline.group(body)

    def bind(self, app: Union[FastAPI, APIRouter]) -> None:
        """Register every declared route on ``app``. Runs once."""
        if self._bound:
            raise RouteRegistrationError("Routes are already bound")

        register_token_convertor()
        for route in self._routes:
            app.add_api_route(
                route.path,
                self._build_endpoint(route),
                methods=[route.method],
                name=route.name,
            )

        for path, routes in self._routes_by_path().items():
            app.add_api_route(
                path,
                self._build_preflight(routes),
                methods=["OPTIONS"],
                include_in_schema=False,
            )

        self._bound = True
        logger.info("Bound %d route(s) under /%s", len(self._routes), self.namespace)

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """FastAPI lifespan hook that binds the routes on startup."""
        if not self._bound:
            self.bind(app)
        yield

    def _routes_by_path(self) -> Dict[str, List[RouteDefinition]]:
        paths: Dict[str, List[RouteDefinition]] = {}
        for route in self._routes:
            paths.setdefault(route.path, []).append(route)
        return paths

    def _build_endpoint(self, route: RouteDefinition):
        pipeline = self.pipeline

        async def endpoint(request: Request, response: Response):
            outcome = await pipeline.apply(request, route.middlewares)
            if isinstance(outcome, Response):
                return _apply_headers(request, response, outcome)

            request = outcome
            result = await route.invoke(request)
            return _apply_headers(request, response, result)

        endpoint.__name__ = route.name
        return endpoint

    def _build_preflight(self, routes: List[RouteDefinition]):
        pipeline = self.pipeline
        allow = ", ".join(route.method for route in routes)

        def route_middlewares() -> List[MiddlewareCallable]:
            seen = set()
            middlewares = []
            for route in routes:
                for middleware in route.middlewares:
                    if id(middleware) not in seen:
                        seen.add(id(middleware))
                        middlewares.append(middleware)
            return middlewares

        async def preflight(request: Request, response: Response):
            outcome = await pipeline.apply(request, route_middlewares())
            if not isinstance(outcome, Response):
                outcome = Response(status_code=405, headers={"Allow": allow})
            return _apply_headers(request, response, outcome)

        return preflight
