"""Test topic sync service."""

from unittest.mock import AsyncMock

import pytest

from topicsync.models.post import COMMENTS_COUNT_KEY, SYNC_COMMENTS_KEY, TOPIC_ID_KEY
from topicsync.models.webhook import WebhookEvent
from topicsync.services.topic_sync_service import SyncOptions

TITLE_FALLBACK = SyncOptions(match_old_topics_by_title=True)


@pytest.mark.asyncio
async def test_posts_count_sets_comment_count(topic_sync_service, make_post, meta_repo):
    """topic_posts_count is authoritative: count becomes posts - 1."""
    post = await make_post(meta={TOPIC_ID_KEY: 42})

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        SyncOptions(),
    )

    assert result.post_ids == [post.id]
    assert result.comments_count == 4
    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 4
    assert await meta_repo.get_meta(post.id, SYNC_COMMENTS_KEY) == "1"


@pytest.mark.asyncio
async def test_posts_count_can_lower_comment_count(topic_sync_service, make_post, meta_repo):
    """Deleted replies lower the count when topic_posts_count is sent."""
    post = await make_post(meta={TOPIC_ID_KEY: 42, COMMENTS_COUNT_KEY: 10})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=3, topic_title="Foo", topic_posts_count=3),
        SyncOptions(),
    )

    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 2


@pytest.mark.asyncio
async def test_post_number_raises_lower_count(topic_sync_service, make_post, meta_repo):
    post = await make_post(meta={TOPIC_ID_KEY: 42, COMMENTS_COUNT_KEY: 2})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo"),
        SyncOptions(),
    )

    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 4
    assert await meta_repo.get_meta(post.id, SYNC_COMMENTS_KEY) == "1"


@pytest.mark.asyncio
async def test_post_number_never_lowers_count(topic_sync_service, make_post, meta_repo):
    post = await make_post(meta={TOPIC_ID_KEY: 42, COMMENTS_COUNT_KEY: 10})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo"),
        SyncOptions(),
    )

    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 10
    # The refresh flag is set even when the count is left alone.
    assert await meta_repo.get_meta(post.id, SYNC_COMMENTS_KEY) == "1"


@pytest.mark.asyncio
async def test_negative_posts_count_falls_back_to_post_number(topic_sync_service, make_post, meta_repo):
    post = await make_post(meta={TOPIC_ID_KEY: 42, COMMENTS_COUNT_KEY: 10})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=-3),
        SyncOptions(),
    )

    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 10


@pytest.mark.asyncio
async def test_post_number_sets_missing_count(topic_sync_service, make_post, meta_repo):
    post = await make_post(meta={TOPIC_ID_KEY: 42})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=3, topic_title="Foo"),
        SyncOptions(),
    )

    assert await meta_repo.get_meta(post.id, COMMENTS_COUNT_KEY) == "2"


@pytest.mark.asyncio
async def test_all_linked_posts_are_updated(topic_sync_service, make_post, meta_repo):
    first = await make_post(title="Foo", meta={TOPIC_ID_KEY: 42})
    second = await make_post(title="Foo (page)", post_type="page", meta={TOPIC_ID_KEY: 42})
    other = await make_post(title="Bar", meta={TOPIC_ID_KEY: 7, COMMENTS_COUNT_KEY: 1})

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=8, topic_title="Foo", topic_posts_count=8),
        SyncOptions(),
    )

    assert sorted(result.post_ids) == sorted([first.id, second.id])
    for post in (first, second):
        assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 7
        assert await meta_repo.get_meta(post.id, SYNC_COMMENTS_KEY) == "1"
    assert await meta_repo.get_int_meta(other.id, COMMENTS_COUNT_KEY) == 1
    assert await meta_repo.get_meta(other.id, SYNC_COMMENTS_KEY) is None


@pytest.mark.asyncio
async def test_title_fallback_backfills_topic_id(topic_sync_service, make_post, meta_repo):
    post = await make_post(title="foo")

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        TITLE_FALLBACK,
    )

    assert result.post_ids == [post.id]
    assert result.matched_by_title is True
    assert await meta_repo.get_meta(post.id, TOPIC_ID_KEY) == "42"
    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 4
    assert await meta_repo.find_post_ids_by_meta(TOPIC_ID_KEY, 42) == [post.id]


@pytest.mark.asyncio
async def test_title_fallback_uses_comparison_without_posts_count(
    topic_sync_service, make_post, meta_repo
):
    post = await make_post(title="FOO", meta={COMMENTS_COUNT_KEY: 2})

    await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo"),
        TITLE_FALLBACK,
    )

    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 4


@pytest.mark.asyncio
async def test_title_fallback_disabled(topic_sync_service, make_post, meta_repo):
    post = await make_post(title="Foo")

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        SyncOptions(match_old_topics_by_title=False),
    )

    assert result.post_ids == []
    assert result.skipped is False
    assert await meta_repo.get_meta(post.id, TOPIC_ID_KEY) is None
    assert await meta_repo.get_meta(post.id, SYNC_COMMENTS_KEY) is None


@pytest.mark.asyncio
async def test_title_fallback_only_when_no_id_match(topic_sync_service, make_post, meta_repo):
    linked = await make_post(title="Something else", meta={TOPIC_ID_KEY: 42})
    same_title = await make_post(title="Foo")

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        TITLE_FALLBACK,
    )

    assert result.post_ids == [linked.id]
    assert result.matched_by_title is False
    assert await meta_repo.get_meta(same_title.id, TOPIC_ID_KEY) is None


@pytest.mark.asyncio
async def test_title_fallback_restricted_to_post_type(topic_sync_service, make_post):
    await make_post(title="Foo", post_type="page")

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        TITLE_FALLBACK,
    )

    assert result.post_ids == []


@pytest.mark.asyncio
async def test_title_fallback_post_type_filter(topic_sync_service, make_post, hooks):
    page = await make_post(title="Foo", post_type="page")
    hooks.add_title_match_post_type_filter(lambda post_type: "page")

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Foo", topic_posts_count=5),
        TITLE_FALLBACK,
    )

    assert result.post_ids == [page.id]


@pytest.mark.asyncio
async def test_after_title_match_hook_receives_title(topic_sync_service, hooks):
    seen = []
    hooks.on_after_get_post_by_title(seen.append)

    result = await topic_sync_service.handle(
        WebhookEvent(topic_id=42, post_number=5, topic_title="Some Title"),
        TITLE_FALLBACK,
    )

    assert result.post_ids == []
    assert seen == ["some title"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "event",
    [
        WebhookEvent(topic_id=42, post_number=5, topic_title=None, topic_posts_count=5),
        WebhookEvent(topic_id=None, post_number=5, topic_title="Foo", topic_posts_count=5),
        WebhookEvent(topic_id=42, post_number=None, topic_title="Foo", topic_posts_count=5),
        WebhookEvent(topic_id=42, post_number=5, topic_title="   ", topic_posts_count=5),
    ],
)
async def test_incomplete_event_is_skipped_without_store_calls(topic_sync_service, event):
    topic_sync_service.meta_repo = AsyncMock()

    result = await topic_sync_service.handle(event, TITLE_FALLBACK)

    assert result.skipped is True
    assert result.post_ids == []
    assert topic_sync_service.meta_repo.method_calls == []


@pytest.mark.asyncio
async def test_process_payload_fires_before_hook(topic_sync_service, make_post, hooks, meta_repo):
    post = await make_post(meta={TOPIC_ID_KEY: 42})
    payloads = []

    async def record(payload):
        payloads.append(payload)

    hooks.on_before_webhook_post_update(record)
    payload = {
        "post": {
            "topic_id": "42",
            "post_number": 2,
            "topic_title": "Foo",
            "topic_posts_count": 2,
            "cooked": "<p>hi</p>",
        }
    }

    result = await topic_sync_service.process_payload(payload, SyncOptions())

    assert payloads == [payload]
    assert result.post_ids == [post.id]
    assert await meta_repo.get_int_meta(post.id, COMMENTS_COUNT_KEY) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"post": None}, {"post": []}, {"topic": {"id": 42}}])
async def test_process_payload_without_post_is_skipped(topic_sync_service, hooks, payload):
    payloads = []
    hooks.on_before_webhook_post_update(payloads.append)

    result = await topic_sync_service.process_payload(payload, SyncOptions())

    assert result.skipped is True
    assert payloads == [payload]
