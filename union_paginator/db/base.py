"""SQLAlchemy metadata registry import for table creation."""

from union_paginator.models import Comment, Post, User
from union_paginator.models.base import Base

__all__ = ["Base", "User", "Post", "Comment"]
