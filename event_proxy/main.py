"""
SendGrid event proxy.
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from event_proxy import __version__
from event_proxy.api.router import api_router
from event_proxy.config import ProxyConfig, get_settings
from event_proxy.services.dispatcher import Dispatcher
from event_proxy.services.event_handler import EventHandler
from event_proxy.services.queue import QueuePublisher, RedisQueuePublisher, close_redis
from event_proxy.utils.auth import Authenticator
from event_proxy.utils.logging import (
    configure_structured_logging,
    generate_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger("event_proxy")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Injects a correlation ID into every request context and response header."""

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get("X-Correlation-ID") or generate_correlation_id()
        set_correlation_id(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response


def build_event_handler(
    config: ProxyConfig,
    publisher: Optional[QueuePublisher] = None,
) -> EventHandler:
    """Wire the authenticator and dispatcher for a given configuration."""
    return EventHandler(
        authenticator=Authenticator(config.auth_digest),
        dispatcher=Dispatcher(publisher or RedisQueuePublisher(), config.queues),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    settings = get_settings()
    logger.info("Event proxy starting up (env=%s)", settings.app_env)

    # Raises ConfigurationError when AUTH or SQS_SUFFIX is missing,
    # which aborts startup.
    config = ProxyConfig.from_settings(settings)
    app.state.event_handler = build_event_handler(config)
    logger.info("Routing notifications to: %s", ", ".join(config.queues.values()))

    if settings.sentry_dsn:
        try:
            import sentry_sdk
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=0.1,
                environment=settings.app_env,
            )
            logger.info("Sentry initialized")
        except Exception as e:
            logger.warning("Sentry initialization failed: %s", str(e))

    yield

    await close_redis()
    logger.info("Event proxy shutdown complete")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    configure_structured_logging(settings.log_level)

    application = FastAPI(
        title="SendGrid Event Proxy",
        description="Forwards SendGrid email events to notification queues",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(CorrelationIdMiddleware)
    application.include_router(api_router)

    return application


app = create_app()
