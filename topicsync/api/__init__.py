"""FastAPI routers for TopicSync API."""

from fastapi import APIRouter

from topicsync.api.routes import health, webhooks


def build_api_router(use_discourse_webhook: bool = True) -> APIRouter:
    """Assemble the API router; the webhook route is optional."""
    api_router = APIRouter()

    if use_discourse_webhook:
        api_router.include_router(webhooks.router, tags=["webhooks"])

    return api_router


health_router = health.router
