"""Post collection: CRUD, comments and like toggles."""

from __future__ import annotations

from typing import Any, Optional
import logging

from postboard.domain.errors import PermissionDeniedError, PostNotFoundError, UserNotFoundError
from postboard.domain.models import Comment, Post, Role, new_id
from postboard.repositories.json_storage import DocumentStore
from postboard.repositories.users import UserRepository

logger = logging.getLogger(__name__)


def _locate(records: list[dict[str, Any]], post_id: str) -> tuple[int, Post]:
    for index, record in enumerate(records):
        post = Post.from_dict(record)
        if post.id == post_id:
            return index, post
    raise PostNotFoundError("Post not found")


class PostRepository:
    """
    Every mutation runs inside one ``DocumentStore.transaction()`` so that
    concurrent requests against the posts collection never overwrite each
    other. Reads go straight to ``load()``.
    """

    def __init__(self, store: DocumentStore, users: UserRepository | None = None, *, require_known_owner: bool = True) -> None:
        self.store = store
        self.users = users
        self.require_known_owner = require_known_owner

    # -------------------------- reads --------------------------
    def list_visible(self, requester_id: str) -> list[Post]:
        posts = (Post.from_dict(r) for r in self.store.load())
        return [p for p in posts if p.user_id == requester_id or p.is_public]

    def get(self, post_id: str) -> Optional[Post]:
        for record in self.store.load():
            post = Post.from_dict(record)
            if post.id == post_id:
                return post
        return None

    # -------------------------- writes --------------------------
    def create(self, owner_id: str, title: str, description: str) -> Post:
        if self.require_known_owner and self.users is not None and not self.users.exists(owner_id):
            raise UserNotFoundError("User not found")
        post = Post(id=new_id(), user_id=owner_id, title=title, description=description)
        with self.store.transaction() as records:
            records.append(post.to_dict())
        logger.info("Post %s created by %s", post.id, owner_id)
        return post

    def add_comment(self, post_id: str, author_id: str, text: str) -> Comment:
        comment = Comment(id=new_id(), user_id=author_id, text=text)
        with self.store.transaction() as records:
            index, post = _locate(records, post_id)
            post.comments.append(comment)
            records[index] = post.to_dict()
        return comment

    def edit(self, post_id: str, requester_id: str, title: str, description: str) -> Post:
        with self.store.transaction() as records:
            index, post = _locate(records, post_id)
            if post.user_id != requester_id:
                logger.warning("User %s may not edit post %s", requester_id, post_id)
                raise PermissionDeniedError("Permission denied")
            post.title = title
            post.description = description
            records[index] = post.to_dict()
        return post

    def delete(self, post_id: str, requester_id: str, requester_role: Role | str) -> None:
        with self.store.transaction() as records:
            index, post = _locate(records, post_id)
            if post.user_id != requester_id and requester_role != Role.ADMIN:
                logger.warning("User %s may not delete post %s", requester_id, post_id)
                raise PermissionDeniedError("Permission denied")
            del records[index]
        logger.info("Post %s deleted by %s", post_id, requester_id)

    def toggle_like(self, post_id: str, user_id: str) -> int:
        """Like the post, or unlike it when ``user_id`` already likes it; returns the like count."""
        with self.store.transaction() as records:
            index, post = _locate(records, post_id)
            if user_id in post.likes:
                post.likes = [u for u in post.likes if u != user_id]
            else:
                post.likes.append(user_id)
            records[index] = post.to_dict()
        return len(post.likes)
