"""Custom exceptions."""
from typing import Optional


class RouteCreatorError(Exception):
    """Base exception for route creator."""

    def __init__(
        self,
        message: str,
        error_type: str = "server_error",
        code: Optional[str] = None,
        http_status: int = 500,
    ):
        self.message = message
        self.error_type = error_type
        self.code = code
        self.http_status = http_status
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }


class AuthenticationError(RouteCreatorError):
    """Caller could not be authenticated."""

    def __init__(self, message: str = "Invalid API key.", code: str = "invalid_api_key"):
        super().__init__(
            message=message,
            error_type="authentication_error",
            code=code,
            http_status=401,
        )


class RateLimitError(RouteCreatorError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Too many requests."):
        super().__init__(
            message=message,
            error_type="rate_limit_error",
            code="rate_limit_exceeded",
            http_status=429,
        )


class RouteRegistrationError(RouteCreatorError):
    """A route could not be declared or bound."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_type="server_error",
            code="route_registration_error",
            http_status=500,
        )


class ConfigurationError(RouteCreatorError):
    """Settings describe something that cannot be built."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_type="server_error",
            code="configuration_error",
            http_status=500,
        )
