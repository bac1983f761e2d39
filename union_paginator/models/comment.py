"""Comment ORM model."""

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from union_paginator.models.base import Base, IdMixin, TimestampMixin


class Comment(Base, IdMixin, TimestampMixin):
    """Comment on a post; comments are deleted outright, never soft-deleted."""

    __tablename__ = "comments"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped["User"] = relationship(back_populates="comments")  # noqa: F821
    post: Mapped["Post"] = relationship(back_populates="comments")  # noqa: F821
