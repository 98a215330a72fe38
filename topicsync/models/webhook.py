"""Webhook models for inbound Discourse post events."""

import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def _coerce_int(value: Any) -> Optional[int]:
    """Read an integer leniently; anything unparseable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class WebhookPostData(BaseModel):
    """
    The ``post`` object of a Discourse post webhook.

    Discourse sends many more fields; only the ones used for syncing are
    kept. Malformed values are read as missing rather than rejected, since
    such deliveries are simply skipped.
    """

    model_config = ConfigDict(extra="ignore")

    topic_id: Optional[int] = None
    post_number: Optional[int] = None
    topic_title: Optional[str] = None
    topic_posts_count: Optional[int] = None
    post_type: Optional[int] = None

    @field_validator("topic_id", "post_number", "topic_posts_count", "post_type", mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> Optional[int]:
        return _coerce_int(v)

    @field_validator("topic_title", mode="before")
    @classmethod
    def clean_title(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str):
            return None
        title = _SPACE_RE.sub(" ", _TAG_RE.sub("", v)).strip()
        return title or None


@dataclass(frozen=True)
class WebhookEvent:
    """Fields read from a Discourse post webhook."""

    topic_id: Optional[int] = None
    post_number: Optional[int] = None
    topic_title: Optional[str] = None
    topic_posts_count: Optional[int] = None
    post_type: Optional[int] = None

    @classmethod
    def from_post_data(cls, data: WebhookPostData) -> "WebhookEvent":
        return cls(
            topic_id=data.topic_id,
            post_number=data.post_number,
            topic_title=data.topic_title,
            topic_posts_count=data.topic_posts_count,
            post_type=data.post_type,
        )

    @property
    def is_actionable(self) -> bool:
        """Whether the event carries a topic id, post number and title."""
        return bool(self.topic_id and self.post_number and self.topic_title and self.topic_title.strip())

    @property
    def comments_count(self) -> Optional[int]:
        """Reply count implied by ``topic_posts_count`` (root post excluded)."""
        if self.topic_posts_count is None or self.topic_posts_count <= 0:
            return None
        return self.topic_posts_count - 1
