"""CORS middleware."""
from typing import Iterable, Optional

from fastapi import Request, Response

from route_creator.core.config import settings
from route_creator.middleware.base import Middleware, MiddlewareResult, queue_response_headers


class Cors(Middleware):
    """Add CORS headers to every response and answer preflight requests."""

    def __init__(
        self,
        allow_origin: Optional[str] = None,
        allow_methods: Optional[Iterable[str]] = None,
        allow_headers: Optional[Iterable[str]] = None,
    ):
        self.headers = {
            "Access-Control-Allow-Origin": allow_origin or settings.cors_allow_origin,
            "Access-Control-Allow-Methods": ", ".join(
                allow_methods or settings.cors_allow_methods
            ),
            "Access-Control-Allow-Headers": ", ".join(
                allow_headers or settings.cors_allow_headers
            ),
        }

    def handle(self, request: Request) -> MiddlewareResult:
        queue_response_headers(request, self.headers)

        if request.method == "OPTIONS":
            return Response(status_code=204)

        return request
