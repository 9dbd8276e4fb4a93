"""FastAPI application factory.

create_app() returns a configured FastAPI instance. The lifespan creates
missing tables (a database that can't be reached stops startup) and
opens the Redis pool used by the rate limiter. Middleware, CORS, error
handlers, and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamhub import __version__
from teamhub.api import api_router
from teamhub.config import settings
from teamhub.errors import StoreError, TeamHubError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "teamhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from teamhub.db.engine import engine, init_models

    # No try/except: if the store is unreachable the process must not serve.
    await init_models(engine)
    logger.info("teamhub.database_ready")

    from teamhub.db.redis import close_redis, init_redis
    if settings.rate_limit_active:
        try:
            await init_redis()
            logger.info("teamhub.redis_connected", url=settings.redis_url)
        except Exception as e:
            # Rate limiting is best-effort; serve without it
            logger.warning("teamhub.redis_unavailable", error=str(e))

    yield

    logger.info("teamhub.shutdown")
    await close_redis()
    await engine.dispose()


# ── Error rendering ───────────────────────────────────────────
# Every failure leaves the API as {"error": message}.


async def _teamhub_error(request: Request, exc: TeamHubError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(
            str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query")
        )
        message = f"Invalid {field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def _store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("teamhub.store_error", path=request.url.path)
    err = StoreError("Server error: Database issue")
    return JSONResponse(status_code=err.status_code, content={"error": err.message})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="TeamHub",
        description="Team collaboration portal — check-ins, meetings, showcase, resources",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from teamhub.middleware.rate_limit import RateLimitMiddleware
    from teamhub.middleware.request_id import RequestIdMiddleware
    from teamhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.add_exception_handler(TeamHubError, _teamhub_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(SQLAlchemyError, _store_error)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: teamhub.main:app)
app = create_app()
