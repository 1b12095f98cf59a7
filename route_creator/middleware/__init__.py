"""Middleware module."""
from route_creator.middleware.api_key import ApiKeyAuthentication
from route_creator.middleware.auth import IsUserAuthenticated
from route_creator.middleware.base import Middleware, as_middleware
from route_creator.middleware.cors import Cors
from route_creator.middleware.rate_limit import RateLimiter

__all__ = [
    "ApiKeyAuthentication",
    "Cors",
    "IsUserAuthenticated",
    "Middleware",
    "RateLimiter",
    "as_middleware",
]
