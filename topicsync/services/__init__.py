"""Services package for TopicSync."""

from topicsync.services.hooks import HookRegistry, get_hook_registry
from topicsync.services.topic_sync_service import SyncOptions, SyncResult, TopicSyncService

__all__ = [
    "HookRegistry",
    "get_hook_registry",
    "SyncOptions",
    "SyncResult",
    "TopicSyncService",
]
