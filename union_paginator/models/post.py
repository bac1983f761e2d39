"""Post ORM model."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from union_paginator.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin


class Post(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    """Post authored by a user."""

    __tablename__ = "posts"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped["User"] = relationship(back_populates="posts")  # noqa: F821
    comments: Mapped[list["Comment"]] = relationship(back_populates="post")  # noqa: F821
