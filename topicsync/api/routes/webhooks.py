"""Discourse webhook endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from topicsync.api.deps import get_app_settings, get_hooks
from topicsync.api.schemas import ErrorResponse
from topicsync.api.verification import verify_discourse_webhook
from topicsync.core.config import Settings
from topicsync.database.session import get_async_session
from topicsync.services.hooks import HookRegistry
from topicsync.services.topic_sync_service import SyncOptions, TopicSyncService

router = APIRouter()


@router.post(
    "/update-topic-content",
    responses={403: {"model": ErrorResponse}},
)
async def update_topic_content(
    payload: dict[str, Any] = Depends(verify_discourse_webhook),
    session: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
    hooks: HookRegistry = Depends(get_hooks),
) -> None:
    """
    Sync comment metadata from a Discourse post webhook.

    Posts linked to the webhook's topic are flagged for a comment refresh
    and get their cached comment count updated. Deliveries for unknown
    topics or without post data succeed without changes.
    """
    service = TopicSyncService(session, hooks=hooks)
    await service.process_payload(payload, SyncOptions.from_settings(settings))
    return None
