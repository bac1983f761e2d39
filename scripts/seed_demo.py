"""Seed demo users, posts and comments for the activity feed.

Usage (from repository root):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo --users 5 --posts-per-user 3
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import delete

# Make `union_paginator` imports work without installing the package.
PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from union_paginator.db.base import Base
from union_paginator.db.session import SessionLocal, engine
from union_paginator.models.comment import Comment
from union_paginator.models.post import Post
from union_paginator.models.user import User
from union_paginator.services.feed import get_feed


def reset_tables(db) -> None:
    """Remove every demo record."""

    db.execute(delete(Comment))
    db.execute(delete(Post))
    db.execute(delete(User))
    db.commit()


def seed(db, *, users: int, posts_per_user: int) -> tuple[int, int, int]:
    """Insert interleaved users, posts and comments one minute apart."""

    clock = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    created_users: list[User] = []
    created_posts: list[Post] = []
    comment_count = 0

    for index in range(users):
        user = User(name=f"Demo User {index + 1}", email=f"user{index + 1}@example.com", created_at=clock)
        db.add(user)
        db.flush()
        created_users.append(user)
        clock += timedelta(minutes=1)

        for post_index in range(posts_per_user):
            post = Post(
                user_id=user.id,
                title=f"Post {post_index + 1} by {user.name}",
                content="Union pagination keeps heterogeneous feeds in one order.",
                created_at=clock,
            )
            db.add(post)
            db.flush()
            created_posts.append(post)
            clock += timedelta(minutes=1)

            if len(created_users) > 1:
                commenter = created_users[(index + post_index) % (len(created_users) - 1)]
                db.add(Comment(user_id=commenter.id, post_id=post.id, content="Nice post!", created_at=clock))
                comment_count += 1
                clock += timedelta(minutes=1)

    db.commit()
    return len(created_users), len(created_posts), comment_count


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo users, posts and comments.")
    parser.add_argument("--users", type=int, default=5, help="Number of users to create (default: 5)")
    parser.add_argument("--posts-per-user", type=int, default=2, help="Posts per user (default: 2)")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing records before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed the demo database and print the first feed page."""

    args = parse_args()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if not args.no_reset:
            reset_tables(db)
        users, posts, comments = seed(db, users=args.users, posts_per_user=args.posts_per_user)
        print(f"Seeded users={users} posts={posts} comments={comments}")

        page = get_feed(db, page=1, per_page=10)
        print(f"Feed total={page.meta.total} last_page={page.meta.last_page}")
        for item in page.items:
            if item is None:
                print("- <unresolved>")
                continue
            print(f"- {item.kind} #{item.id} at {item.created_at.isoformat()}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
