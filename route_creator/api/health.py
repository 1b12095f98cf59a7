"""Health check endpoints."""
from fastapi import Request

from route_creator.routing import ApiRouter


async def health(request: Request):
    """Health check endpoint."""
    return {"status": "healthy"}


async def ready(request: Request):
    """Readiness check endpoint."""
    return {"status": "ready"}


def declare_routes(routes: ApiRouter) -> None:
    routes.get("/health", health)
    routes.get("/ready", ready)
