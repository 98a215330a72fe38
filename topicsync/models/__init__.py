"""TopicSync models package."""

from topicsync.models.base import Base, TimestampMixin
from topicsync.models.post import (
    COMMENTS_COUNT_KEY,
    DEFAULT_POST_TYPE,
    SYNC_COMMENTS_KEY,
    TOPIC_ID_KEY,
    Post,
    PostMeta,
)
from topicsync.models.webhook import WebhookEvent, WebhookPostData

__all__ = [
    "Base",
    "TimestampMixin",
    "Post",
    "PostMeta",
    "WebhookEvent",
    "WebhookPostData",
    "TOPIC_ID_KEY",
    "COMMENTS_COUNT_KEY",
    "SYNC_COMMENTS_KEY",
    "DEFAULT_POST_TYPE",
]
