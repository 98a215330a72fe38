"""Post and post metadata models."""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from topicsync.models.base import Base, TimestampMixin

# Metadata keys shared with the publishing system
TOPIC_ID_KEY = "discourse_topic_id"
COMMENTS_COUNT_KEY = "discourse_comments_count"
SYNC_COMMENTS_KEY = "wpdc_sync_post_comments"

DEFAULT_POST_TYPE = "post"


class Post(Base, TimestampMixin):
    """
    A content item owned by the publishing system.

    TopicSync never creates or deletes posts. It only reads titles and
    types and writes rows in ``post_meta``.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    post_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_POST_TYPE,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="publish")

    meta: Mapped[list["PostMeta"]] = relationship(
        "PostMeta",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title!r}, type={self.post_type})>"


class PostMeta(Base):
    """A single key/value metadata entry attached to a post."""

    __tablename__ = "post_meta"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    post: Mapped["Post"] = relationship("Post", back_populates="meta")

    __table_args__ = (
        Index("ix_post_meta_key_value", "meta_key", "meta_value"),
        Index("ix_post_meta_post_key", "post_id", "meta_key"),
    )

    def __repr__(self) -> str:
        return f"<PostMeta(post_id={self.post_id}, key={self.meta_key}, value={self.meta_value!r})>"
