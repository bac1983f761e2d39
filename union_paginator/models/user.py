"""User ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from union_paginator.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin


class User(Base, IdMixin, TimestampMixin, SoftDeleteMixin):
    """Feed participant."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)

    posts: Mapped[list["Post"]] = relationship(back_populates="user")  # noqa: F821
    comments: Mapped[list["Comment"]] = relationship(back_populates="user")  # noqa: F821
