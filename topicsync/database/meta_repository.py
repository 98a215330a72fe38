"""Post metadata store."""

from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from topicsync.core.logging import get_logger
from topicsync.database.repository import BaseRepository
from topicsync.models.post import Post, PostMeta

logger = get_logger(__name__)

RAISE_ATTEMPTS = 5


class PostMetaRepository(BaseRepository[PostMeta]):
    """
    Lookups and writes against the ``post_meta`` key/value table.

    Values are stored as text. Integer helpers treat a missing or empty
    value as 0.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(PostMeta, session)

    async def find_post_ids_by_meta(self, key: str, value: Any) -> list[int]:
        """
        Find every post carrying ``key = value``.

        A Discourse topic may back more than one post, so all matches
        are returned.
        """
        query = (
            select(PostMeta.post_id)
            .where(PostMeta.meta_key == key, PostMeta.meta_value == str(value))
            .distinct()
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_post_id_by_title(self, title: str, post_type: str) -> Optional[int]:
        """Case-insensitive exact title lookup restricted to one post type."""
        query = (
            select(Post.id)
            .where(
                func.lower(Post.title) == title.lower(),
                Post.post_type == post_type,
            )
            .order_by(Post.id)
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_meta(self, post_id: int, key: str) -> Optional[str]:
        # Column select so values written by bulk UPDATEs are never read stale
        # from the identity map.
        query = (
            select(PostMeta.meta_value)
            .where(PostMeta.post_id == post_id, PostMeta.meta_key == key)
            .order_by(PostMeta.id)
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_int_meta(self, post_id: int, key: str) -> int:
        return _parse_int(await self.get_meta(post_id, key))

    async def set_meta(self, post_id: int, key: str, value: Any) -> None:
        """Insert or overwrite a metadata value."""
        result = await self.session.execute(
            update(PostMeta)
            .where(PostMeta.post_id == post_id, PostMeta.meta_key == key)
            .values(meta_value=str(value))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.create(post_id=post_id, meta_key=key, meta_value=str(value))
        else:
            await self.session.flush()

    async def raise_int_meta(self, post_id: int, key: str, value: int) -> bool:
        """
        Store ``value`` only if it is strictly greater than the current value.

        The current text is read, parsed like :meth:`get_int_meta`, and
        replaced with a compare-and-swap UPDATE that only matches while the
        row still holds that exact text. A concurrent writer makes the swap
        miss, and the comparison is retried against the new value. Stored
        text is never cast in SQL, so non-numeric values read as 0 on every
        backend.

        Returns:
            True if a row was written
        """
        for _ in range(RAISE_ATTEMPTS):
            row = await self.get_by(post_id=post_id, meta_key=key)
            if row is None:
                if value <= 0:
                    return False
                await self.create(post_id=post_id, meta_key=key, meta_value=str(value))
                return True

            stored = row.meta_value
            if _parse_int(stored) >= value:
                return False

            unchanged = (
                PostMeta.meta_value.is_(None) if stored is None else PostMeta.meta_value == stored
            )
            result = await self.session.execute(
                update(PostMeta)
                .where(PostMeta.id == row.id, unchanged)
                .values(meta_value=str(value))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                await self.session.flush()
                return True

        logger.warning(
            "Gave up raising metadata value",
            post_id=post_id,
            meta_key=key,
            value=value,
            attempts=RAISE_ATTEMPTS,
        )
        return False


def _parse_int(value: Optional[str]) -> int:
    """Stored text as an integer; missing, empty or non-numeric is 0."""
    try:
        return int(value) if value else 0
    except ValueError:
        return 0
