"""Readable route declarations and middleware chains for FastAPI."""
from route_creator.middleware import (
    ApiKeyAuthentication,
    Cors,
    IsUserAuthenticated,
    Middleware,
    RateLimiter,
)
from route_creator.routing import ApiRouter, MiddlewarePipeline, RouteDefinition, translate_pattern

__version__ = "1.0.0"

__all__ = [
    "ApiKeyAuthentication",
    "ApiRouter",
    "Cors",
    "IsUserAuthenticated",
    "Middleware",
    "MiddlewarePipeline",
    "RateLimiter",
    "RouteDefinition",
    "translate_pattern",
]
