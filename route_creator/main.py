"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from route_creator.api import health, items
from route_creator.core.config import settings
from route_creator.core.exceptions import RouteCreatorError
from route_creator.core.logging import setup_logging
from route_creator.db.transient import TransientStore, get_transient_store
from route_creator.middleware import Cors, RateLimiter
from route_creator.routing import ApiRouter

logger = logging.getLogger(__name__)


def build_routes(store: Optional[TransientStore] = None) -> ApiRouter:
    """Declare the example routes and their middlewares."""
    routes = ApiRouter()
    routes.add_middleware(Cors())
    routes.add_middleware(RateLimiter(store=store))

    health.declare_routes(routes)
    items.declare_routes(routes)
    return routes


def create_app(routes: Optional[ApiRouter] = None) -> FastAPI:
    setup_logging(settings.log_level)
    if routes is None:
        routes = build_routes(get_transient_store())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if not routes.is_bound:
            routes.bind(app)
        app.state.routes = routes
        logger.info("%s v%s ready", settings.app_name, settings.app_version)

        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Readable route declarations with middleware chains",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    @app.exception_handler(RouteCreatorError)
    async def route_creator_error_handler(request: Request, exc: RouteCreatorError):
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "route_creator.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
