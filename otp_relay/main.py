from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import Settings, get_settings
from .api.routers import health as health_router
from .api.routers import metrics as metrics_router
from .api.routers import otp as otp_router
from .observability.logging import setup_logging
from .middleware.request_context import RequestContextMiddleware
from .observability.metrics import MetricsHTTPMiddleware
from .services.mailer import Mailer, SendGridMailer
import uvicorn

log = logging.getLogger("otp_relay.startup")


def create_app(settings: Optional[Settings] = None, mailer: Optional[Mailer] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

    # startup diagnostics (never log the key itself)
    log.info("API key loaded: %s", bool(settings.SENDGRID_API_KEY))
    log.info("Sender: %s", settings.SENDGRID_SENDER)

    app.state.settings = settings
    app.state.mailer = mailer or SendGridMailer(
        settings.SENDGRID_API_KEY, timeout_sec=settings.SEND_TIMEOUT_SEC
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.REQUEST_ID_HEADER],
    )

    # then the custom middlewares
    app.add_middleware(RequestContextMiddleware, header=settings.REQUEST_ID_HEADER)
    app.add_middleware(MetricsHTTPMiddleware)

    app.include_router(otp_router.router)
    app.include_router(health_router.router)
    app.include_router(metrics_router.build_router(settings.METRICS_ENABLED))

    return app


def run() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    run()
