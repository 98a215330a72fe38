"""Extension points for the topic sync flow.

Observers register plain or async callables:

- before-update listeners receive the raw webhook payload,
- after-title-match listeners receive the (lower-cased) title searched,
- title-match post type filters map the fallback post type to a new one.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Union

from topicsync.core.exceptions import HookError
from topicsync.core.logging import get_logger

logger = get_logger(__name__)

PayloadListener = Callable[[dict[str, Any]], Union[None, Awaitable[None]]]
TitleListener = Callable[[str], Union[None, Awaitable[None]]]
PostTypeFilter = Callable[[str], str]

BEFORE_WEBHOOK_POST_UPDATE = "before_webhook_post_update"
AFTER_GET_POST_BY_TITLE = "after_get_post_by_title"
TITLE_MATCH_POST_TYPE = "title_match_post_type"


class HookRegistry:
    """Holds hook registrations and runs them in registration order."""

    def __init__(self) -> None:
        self._before_update: list[PayloadListener] = []
        self._after_title_match: list[TitleListener] = []
        self._post_type_filters: list[PostTypeFilter] = []

    def on_before_webhook_post_update(self, callback: PayloadListener) -> PayloadListener:
        """Register a listener for the raw payload. Usable as a decorator."""
        self._before_update.append(callback)
        return callback

    def on_after_get_post_by_title(self, callback: TitleListener) -> TitleListener:
        """Register a listener fired after each title match attempt."""
        self._after_title_match.append(callback)
        return callback

    def add_title_match_post_type_filter(self, callback: PostTypeFilter) -> PostTypeFilter:
        """Register a filter over the post type used for title matching."""
        self._post_type_filters.append(callback)
        return callback

    def clear(self) -> None:
        self._before_update.clear()
        self._after_title_match.clear()
        self._post_type_filters.clear()

    async def fire_before_webhook_post_update(self, payload: dict[str, Any]) -> None:
        for callback in self._before_update:
            await self._call(BEFORE_WEBHOOK_POST_UPDATE, callback, payload)

    async def fire_after_get_post_by_title(self, title: str) -> None:
        for callback in self._after_title_match:
            await self._call(AFTER_GET_POST_BY_TITLE, callback, title)

    def filter_title_match_post_type(self, post_type: str) -> str:
        for callback in self._post_type_filters:
            try:
                post_type = callback(post_type)
            except Exception as e:
                logger.error("Hook failed", hook=TITLE_MATCH_POST_TYPE, error=str(e))
                raise HookError(TITLE_MATCH_POST_TYPE, str(e)) from e
        return post_type

    async def _call(self, hook: str, callback: Callable[..., Any], arg: Any) -> None:
        try:
            result = callback(arg)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error("Hook failed", hook=hook, error=str(e))
            raise HookError(hook, str(e)) from e


_registry = HookRegistry()


def get_hook_registry() -> HookRegistry:
    """Get the process-wide hook registry."""
    return _registry
