"""TopicSync core package - configuration, logging and errors."""

from topicsync.core.config import Settings, get_settings
from topicsync.core.exceptions import TopicSyncError, WebhookAuthenticationError
from topicsync.core.logging import configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "TopicSyncError",
    "WebhookAuthenticationError",
    "configure_logging",
    "get_logger",
]
