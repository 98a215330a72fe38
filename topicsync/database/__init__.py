"""Database package for TopicSync."""

from topicsync.database.session import (
    create_engine_from_settings,
    create_session_factory,
    get_async_session,
    init_db,
)
from topicsync.database.repository import BaseRepository
from topicsync.database.meta_repository import PostMetaRepository

__all__ = [
    "create_engine_from_settings",
    "create_session_factory",
    "get_async_session",
    "init_db",
    "BaseRepository",
    "PostMetaRepository",
]
