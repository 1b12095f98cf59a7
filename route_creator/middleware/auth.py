"""Login check middleware."""
import logging
from typing import Callable, Optional

from fastapi import Request

from route_creator.core.exceptions import AuthenticationError
from route_creator.middleware.base import Middleware, MiddlewareResult, error_response

logger = logging.getLogger(__name__)


def scope_user_is_authenticated(request: Request) -> bool:
    """Read the user set by Starlette's ``AuthenticationMiddleware``."""
    user = request.scope.get("user")
    return bool(getattr(user, "is_authenticated", False))


class IsUserAuthenticated(Middleware):
    """Reject requests from callers that are not logged in.

    The login state comes from the host application. By default that is the
    user Starlette's authentication middleware puts in the request scope;
    pass ``check`` to read it from somewhere else.
    """

    def __init__(self, check: Optional[Callable[[Request], bool]] = None):
        self.check = check or scope_user_is_authenticated

    def handle(self, request: Request) -> MiddlewareResult:
        if not self.check(request):
            logger.warning(
                "Unauthenticated request to %s %s", request.method, request.url.path
            )
            return error_response(
                AuthenticationError("User is not authenticated.", code="not_authenticated")
            )

        return request
