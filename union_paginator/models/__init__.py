"""ORM models package exports."""

from union_paginator.models.comment import Comment
from union_paginator.models.post import Post
from union_paginator.models.user import User

__all__ = ["User", "Post", "Comment"]
