"""Service and route tests for the combined activity feed."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from union_paginator.db.dependencies import get_db
from union_paginator.errors import UnregisteredEntityType
from union_paginator.main import app
from union_paginator.models.base import Base
from union_paginator.models.comment import Comment
from union_paginator.models.post import Post
from union_paginator.models.user import User
from union_paginator.schemas.feed import CommentFeedItem, PostFeedItem, RawFeedItem, UserFeedItem
from union_paginator.services.feed import build_feed_paginator, get_feed, get_raw_feed


class FeedServiceTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(Comment))
        self.db.execute(delete(Post))
        self.db.execute(delete(User))
        self.db.commit()
        self._seed()

    def tearDown(self) -> None:
        self.db.close()

    def test_feed_returns_typed_items_newest_first(self) -> None:
        page = get_feed(self.db, page=1, per_page=10)

        self.assertEqual(page.meta.total, 6)
        self.assertEqual(
            [item.kind for item in page.items],
            ["comment", "post", "user", "post", "post", "user"],
        )
        comment = page.items[0]
        self.assertIsInstance(comment, CommentFeedItem)
        self.assertEqual(comment.author_name, "Grace")
        self.assertEqual(comment.post_id, self.ada_post.id)
        self.assertIsInstance(page.items[1], PostFeedItem)
        self.assertEqual(page.items[1].author_name, "Grace")
        self.assertIsInstance(page.items[-1], UserFeedItem)
        self.assertEqual(page.items[-1].name, "Ada")

    def test_feed_pagination_metadata(self) -> None:
        page = get_feed(self.db, page=2, per_page=4)

        self.assertEqual(len(page.items), 2)
        self.assertEqual(page.meta.last_page, 2)
        self.assertEqual((page.meta.from_item, page.meta.to_item), (5, 6))
        self.assertFalse(page.meta.has_more_pages)

    def test_feed_kind_and_author_filters(self) -> None:
        page = get_feed(self.db, page=1, per_page=10, kinds=["post", "comment"], author_id=self.grace.id)

        self.assertEqual([(item.kind, item.author_id) for item in page.items], [("comment", self.grace.id), ("post", self.grace.id)])

    def test_feed_search_applies_to_every_kind(self) -> None:
        page = get_feed(self.db, page=1, per_page=10, query="engine", order="asc")

        self.assertEqual([item.kind for item in page.items], ["post", "comment"])

    def test_feed_hides_soft_deleted_posts(self) -> None:
        self.ada_post.soft_delete()
        self.db.commit()

        page = get_feed(self.db, page=1, per_page=10, kinds=["post"])

        self.assertEqual(page.meta.total, 2)
        self.assertNotIn(self.ada_post.id, [item.id for item in page.items])

    def test_feed_with_a_subset_of_kinds(self) -> None:
        users = get_feed(self.db, page=1, per_page=5, kinds=["user"])
        self.assertEqual([item.name for item in users.items], ["Grace", "Ada"])

        posts = get_feed(self.db, page=1, per_page=5, kinds=["post"])
        self.assertEqual(
            [item.title for item in posts.items],
            ["Compilers", "Bernoulli numbers", "Analytical engine notes"],
        )
        self.assertEqual(posts.items[0].author_name, "Grace")

        mixed = get_feed(self.db, page=1, per_page=5, kinds=["user", "post"])
        self.assertEqual(mixed.meta.total, 5)
        self.assertEqual([item.kind for item in mixed.items], ["post", "user", "post", "post", "user"])
        self.assertTrue(all(item is not None for item in mixed.items))

    def test_raw_feed_skips_loading(self) -> None:
        page = get_raw_feed(self.db, page=1, per_page=3)

        self.assertTrue(all(isinstance(item, RawFeedItem) for item in page.items))
        self.assertEqual([item.kind for item in page.items], ["comment", "post", "user"])
        self.assertEqual(page.meta.total, 6)

    def test_unknown_kinds_are_rejected(self) -> None:
        with self.assertRaises(UnregisteredEntityType):
            build_feed_paginator(self.db, kinds=["user", "photo"])

    def test_feed_route_wraps_the_page_in_the_api_envelope(self) -> None:
        client = self._client()

        response = client.get("/feed", params={"per_page": 2, "page": 1, "types": ["user"]})

        self.assertEqual(response.status_code, 200)
        payload = response.json()["data"]
        self.assertEqual(payload["meta"]["total"], 2)
        self.assertEqual([item["name"] for item in payload["items"]], ["Grace", "Ada"])

    def test_feed_route_resolves_posts_and_comments_with_authors(self) -> None:
        client = self._client()

        response = client.get("/feed", params={"types": ["post", "comment"]})

        self.assertEqual(response.status_code, 200)
        payload = response.json()["data"]
        self.assertEqual(payload["meta"]["total"], 4)
        self.assertEqual([item["kind"] for item in payload["items"]], ["comment", "post", "post", "post"])
        self.assertEqual(payload["items"][0]["author_name"], "Grace")
        self.assertEqual(payload["items"][-1]["author_name"], "Ada")

    def test_raw_route_with_a_single_kind(self) -> None:
        client = self._client()

        response = client.get("/feed/raw", params={"types": ["user"]})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["kind"] for item in response.json()["data"]["items"]], ["user", "user"])

    def test_raw_route_and_validation(self) -> None:
        client = self._client()

        raw = client.get("/feed/raw", params={"order": "asc", "per_page": 1})
        self.assertEqual(raw.status_code, 200)
        self.assertEqual(raw.json()["data"]["items"][0]["kind"], "user")

        self.assertEqual(client.get("/feed", params={"per_page": 0}).status_code, 422)
        self.assertEqual(client.get("/feed", params={"types": ["photo"]}).status_code, 422)

    def _client(self) -> TestClient:
        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        return TestClient(app)

    def _seed(self) -> None:
        clock = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)

        def tick() -> datetime:
            nonlocal clock
            clock += timedelta(minutes=5)
            return clock

        self.ada = User(name="Ada", email="ada@example.com", created_at=tick())
        self.db.add(self.ada)
        self.db.flush()
        self.ada_post = Post(user_id=self.ada.id, title="Analytical engine notes", content="loops", created_at=tick())
        self.db.add(self.ada_post)
        self.db.flush()
        self.db.add(Post(user_id=self.ada.id, title="Bernoulli numbers", content="tables", created_at=tick()))
        self.grace = User(name="Grace", email="grace@example.com", created_at=tick())
        self.db.add(self.grace)
        self.db.flush()
        self.db.add(Post(user_id=self.grace.id, title="Compilers", content="A-0 system", created_at=tick()))
        self.db.add(
            Comment(
                user_id=self.grace.id,
                post_id=self.ada_post.id,
                content="The engine design holds up",
                created_at=tick(),
            )
        )
        self.db.commit()


if __name__ == "__main__":
    unittest.main()
