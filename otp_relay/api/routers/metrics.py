from fastapi import APIRouter
from ...observability.metrics import metrics_app


def build_router(enabled: bool = True) -> APIRouter:
    router = APIRouter(tags=["metrics"])
    router.add_api_route("/metrics", metrics_app(enabled), methods=["GET"])
    return router
