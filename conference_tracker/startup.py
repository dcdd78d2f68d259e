"""
Application bootstrap

- register_services: builds every service once, from the settings
- configure_pipeline: assembles the ordered middleware pipeline
- create_app: composes both into a FastAPI application
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI
from starlette.middleware import Middleware
from starlette.middleware.errors import ServerErrorMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware

from conference_tracker.api import api_router
from conference_tracker.core.auth import IdentityOptions, authentication_middleware
from conference_tracker.core.config import Settings, get_settings
from conference_tracker.core.cookies import CookiePolicyOptions
from conference_tracker.core.cors import CorsOptions, cors_middleware
from conference_tracker.core.middleware import (
    CookiePolicyMiddleware,
    DatabaseErrorPageMiddleware,
    ExceptionHandlerMiddleware,
    HSTSMiddleware,
    StaticFilesMiddleware,
)
from conference_tracker.core.services import ServiceRegistry
from conference_tracker.db import Database, ensure_created
from conference_tracker.repositories import PresentationRepository, SpeakerRepository

Pipeline = tuple[Middleware, ...]


def register_services(settings: Settings) -> ServiceRegistry:
    """Build the service registry; a missing SecretMessage is not an error"""
    cors = CorsOptions().add_policy(settings.CORS_POLICY_NAME, settings.CORS_ORIGINS)

    return ServiceRegistry(
        settings=settings,
        secret_message=settings.SECRET_MESSAGE,
        cookie_policy=CookiePolicyOptions(
            consent_cookie_name=settings.CONSENT_COOKIE_NAME,
            check_consent_needed=lambda connection: True,
            minimum_same_site="none",
            essential_cookies=frozenset({settings.AUTH_COOKIE_NAME}),
        ),
        database=Database(settings.database_url),
        identity=IdentityOptions(require_confirmed_account=True),
        cors=cors,
        presentation_repository=PresentationRepository,
        speaker_repository=SpeakerRepository,
    )


def configure_pipeline(
    services: ServiceRegistry,
    is_development: bool,
    logger: Any = None,
) -> Pipeline:
    """
    Ordered middleware pipeline, outermost first.

    The first entries depend on the environment: development returns
    tracebacks and database diagnostics to the caller, every other
    environment redirects failures to the error page and enforces HSTS.
    The rest is fixed: CORS, HTTPS redirection, static files, cookie policy,
    authentication. Routing, per-endpoint authorization and dispatch happen
    in the router behind the last entry.
    """
    logger = logger or structlog.get_logger()
    settings = services.settings

    pipeline: list[Middleware] = []
    if is_development:
        logger.info("Environment is in development")
        pipeline.append(Middleware(ServerErrorMiddleware, debug=True))
        pipeline.append(Middleware(DatabaseErrorPageMiddleware))
    else:
        pipeline.append(Middleware(ExceptionHandlerMiddleware, error_path=settings.ERROR_PATH))
        pipeline.append(
            Middleware(
                HSTSMiddleware,
                max_age=settings.HSTS_MAX_AGE,
                include_subdomains=settings.HSTS_INCLUDE_SUBDOMAINS,
                preload=settings.HSTS_PRELOAD,
                excluded_hosts=settings.HSTS_EXCLUDED_HOSTS,
            )
        )

    pipeline.extend(
        [
            cors_middleware(services.cors.get_policy(settings.CORS_POLICY_NAME)),
            Middleware(HTTPSRedirectMiddleware),
            Middleware(StaticFilesMiddleware, directory=settings.STATIC_FILES_DIR),
            Middleware(CookiePolicyMiddleware, options=services.cookie_policy),
            authentication_middleware(settings),
        ]
    )
    return tuple(pipeline)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application: services, pipeline and routes, exactly once"""
    settings = settings or get_settings()
    logger = structlog.get_logger()

    services = register_services(settings)
    pipeline = configure_pipeline(services, settings.is_development, logger)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting ConferenceTracker", version=settings.APP_VERSION, environment=settings.ENVIRONMENT)
        settings.validate_secrets()
        if settings.is_using_default_secrets:
            logger.warning("Using the default JWT_SECRET_KEY, change it outside development")

        await ensure_created(services.database)

        yield

        logger.info("Shutting down ConferenceTracker")
        await services.database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Conference presentations and speakers",
        # The pipeline carries its own developer exception page
        debug=False,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        middleware=list(pipeline),
        lifespan=lifespan,
    )
    app.state.services = services
    app.state.pipeline = pipeline

    app.include_router(api_router)

    @app.get("/health", include_in_schema=False)
    async def health_check():
        """Liveness probe"""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    return app
