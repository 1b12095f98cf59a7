"""API key authentication middleware."""
import logging
from typing import Iterable, Optional

from fastapi import Request

from route_creator.core.config import settings
from route_creator.core.exceptions import AuthenticationError
from route_creator.middleware.base import Middleware, MiddlewareResult, error_response

logger = logging.getLogger(__name__)


class ApiKeyAuthentication(Middleware):
    """Reject requests whose API key header is not in the allow-list."""

    def __init__(
        self,
        valid_api_keys: Optional[Iterable[str]] = None,
        header: Optional[str] = None,
    ):
        keys = settings.api_keys if valid_api_keys is None else valid_api_keys
        self.valid_api_keys = frozenset(keys)
        self.header = header or settings.api_key_header

    def handle(self, request: Request) -> MiddlewareResult:
        api_key = request.headers.get(self.header)

        if api_key is None or api_key not in self.valid_api_keys:
            logger.warning(
                "Invalid API key for %s %s", request.method, request.url.path
            )
            return error_response(
                AuthenticationError("Invalid API key."),
                headers={"WWW-Authenticate": "ApiKey"},
            )

        return request
