"""Topic sync service: keeps post metadata in step with Discourse topics."""

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from topicsync.core.config import Settings
from topicsync.core.logging import LogContext, LoggerMixin
from topicsync.database.meta_repository import PostMetaRepository
from topicsync.models.post import (
    COMMENTS_COUNT_KEY,
    DEFAULT_POST_TYPE,
    SYNC_COMMENTS_KEY,
    TOPIC_ID_KEY,
)
from topicsync.models.webhook import WebhookEvent, WebhookPostData
from topicsync.services.hooks import HookRegistry, get_hook_registry


@dataclass(frozen=True)
class SyncOptions:
    """Per-request switches for the sync."""

    match_old_topics_by_title: bool = False
    title_match_post_type: str = DEFAULT_POST_TYPE

    @classmethod
    def from_settings(cls, settings: Settings) -> "SyncOptions":
        return cls(
            match_old_topics_by_title=settings.webhook_match_old_topics,
            title_match_post_type=settings.title_match_post_type,
        )


@dataclass
class SyncResult:
    """Outcome of handling one webhook."""

    skipped: bool = False
    post_ids: list[int] = field(default_factory=list)
    matched_by_title: bool = False
    comments_count: Optional[int] = None


class TopicSyncService(LoggerMixin):
    """
    Service that applies Discourse topic webhooks to post metadata.

    Posts are found through their ``discourse_topic_id`` metadata. Posts
    published before that key was stored can optionally be matched by
    title, in which case the key is backfilled for the next delivery.
    """

    def __init__(
        self,
        session: AsyncSession,
        hooks: Optional[HookRegistry] = None,
    ) -> None:
        self.session = session
        self.meta_repo = PostMetaRepository(session)
        self.hooks = hooks if hooks is not None else get_hook_registry()

    async def process_payload(
        self,
        payload: dict[str, Any],
        options: SyncOptions,
    ) -> SyncResult:
        """
        Handle a verified webhook body.

        Fires the before-update hook with the raw payload, then syncs the
        ``post`` object if one is present.
        """
        await self.hooks.fire_before_webhook_post_update(payload)

        post_data = payload.get("post") if isinstance(payload, dict) else None
        if not post_data or not isinstance(post_data, dict):
            self.logger.debug("Webhook payload has no post data")
            return SyncResult(skipped=True)

        event = WebhookEvent.from_post_data(WebhookPostData.model_validate(post_data))
        return await self.handle(event, options)

    async def handle(self, event: WebhookEvent, options: SyncOptions) -> SyncResult:
        """
        Update comment metadata for every post linked to the event's topic.

        Args:
            event: Verified webhook event
            options: Sync options

        Returns:
            Sync result; zero matched posts is not an error
        """
        if not event.is_actionable:
            self.logger.debug(
                "Skipping webhook without topic_id, post_number or topic_title",
                topic_id=event.topic_id,
                post_number=event.post_number,
            )
            return SyncResult(skipped=True)

        comments_count = event.comments_count

        with LogContext(topic_id=event.topic_id):
            post_ids = await self.meta_repo.find_post_ids_by_meta(TOPIC_ID_KEY, event.topic_id)
            matched_by_title = False

            if not post_ids and options.match_old_topics_by_title:
                post_id = await self.get_post_id_by_title(
                    event.topic_title,
                    event.topic_id,
                    options.title_match_post_type,
                )
                if post_id is not None:
                    post_ids.append(post_id)
                    matched_by_title = True

            if not post_ids:
                self.logger.info("No posts linked to topic")
                return SyncResult(comments_count=comments_count)

            for post_id in post_ids:
                await self.meta_repo.set_meta(post_id, SYNC_COMMENTS_KEY, 1)

                if comments_count is not None:
                    await self.meta_repo.set_meta(post_id, COMMENTS_COUNT_KEY, comments_count)
                    updated = True
                else:
                    # Payloads without topic_posts_count only ever raise the count.
                    updated = await self.meta_repo.raise_int_meta(
                        post_id,
                        COMMENTS_COUNT_KEY,
                        event.post_number - 1,
                    )

                self.logger.info(
                    "Post marked for comment sync",
                    post_id=post_id,
                    comments_count=comments_count,
                    post_number=event.post_number,
                    count_updated=updated,
                )

        return SyncResult(
            post_ids=post_ids,
            matched_by_title=matched_by_title,
            comments_count=comments_count,
        )

    async def get_post_id_by_title(
        self,
        title: str,
        topic_id: int,
        post_type: str = DEFAULT_POST_TYPE,
    ) -> Optional[int]:
        """
        Match a post published before topic ids were stored, by its title.

        On a match the post's ``discourse_topic_id`` is backfilled so that the
        next webhook for this topic finds it directly.
        """
        title = title.lower()
        post_type = self.hooks.filter_title_match_post_type(post_type)

        post_id = await self.meta_repo.find_post_id_by_title(title, post_type)
        if post_id is not None:
            await self.meta_repo.set_meta(post_id, TOPIC_ID_KEY, topic_id)
            self.logger.info(
                "Post matched by title",
                post_id=post_id,
                post_type=post_type,
            )

        await self.hooks.fire_after_get_post_by_title(title)

        return post_id
