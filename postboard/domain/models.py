"""
Record types stored in the users/posts collections.

Each record is a fixed-shape dataclass. ``from_dict`` validates the JSON
mapping read from disk and raises ``CorruptRecordError`` for missing fields or
wrong types; unknown keys are ignored. ``to_dict`` produces the on-disk
(camelCase) representation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping
import uuid

from postboard.domain.errors import CorruptRecordError


def new_id() -> str:
    return str(uuid.uuid4())


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


def _field(data: Mapping[str, Any], key: str, kind: type, record: str) -> Any:
    if key not in data:
        raise CorruptRecordError(f"{record} record missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise CorruptRecordError(f"{record} field '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _id_list(data: Mapping[str, Any], key: str, record: str) -> list[str]:
    values = _field(data, key, list, record)
    if not all(isinstance(v, str) for v in values):
        raise CorruptRecordError(f"{record} field '{key}' must contain only ids")
    return list(values)


def _mapping(data: Any, record: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise CorruptRecordError(f"{record} record must be an object, got {type(data).__name__}")
    return data


@dataclass
class User:
    id: str
    username: str
    email: str
    mobile: str
    password: str
    role: Role = Role.USER
    followers: list[str] = field(default_factory=list)
    following: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        data = _mapping(data, "user")
        raw_role = _field(data, "role", str, "user")
        try:
            role = Role(raw_role)
        except ValueError:
            raise CorruptRecordError(f"user field 'role' has unknown value '{raw_role}'") from None
        return cls(
            id=_field(data, "id", str, "user"),
            username=_field(data, "username", str, "user"),
            email=_field(data, "email", str, "user"),
            mobile=_field(data, "mobile", str, "user"),
            password=_field(data, "password", str, "user"),
            role=role,
            followers=_id_list(data, "followers", "user"),
            following=_id_list(data, "following", "user"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "mobile": self.mobile,
            "role": self.role.value,
            "followers": list(self.followers),
            "following": list(self.following),
        }


@dataclass
class Comment:
    id: str
    user_id: str
    text: str
    replies: list[dict] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Comment":
        data = _mapping(data, "comment")
        return cls(
            id=_field(data, "id", str, "comment"),
            user_id=_field(data, "userId", str, "comment"),
            text=_field(data, "text", str, "comment"),
            replies=list(_field(data, "replies", list, "comment")),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "userId": self.user_id, "text": self.text, "replies": list(self.replies)}


@dataclass
class Post:
    id: str
    user_id: str
    title: str
    description: str
    comments: list[Comment] = field(default_factory=list)
    likes: list[str] = field(default_factory=list)
    # Read by the visibility filter; no operation sets it.
    is_public: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "Post":
        data = _mapping(data, "post")
        is_public = data.get("isPublic")
        if is_public is None:
            is_public = False
        if not isinstance(is_public, bool):
            raise CorruptRecordError("post field 'isPublic' must be bool")
        return cls(
            id=_field(data, "id", str, "post"),
            user_id=_field(data, "userId", str, "post"),
            title=_field(data, "title", str, "post"),
            description=_field(data, "description", str, "post"),
            comments=[Comment.from_dict(c) for c in _field(data, "comments", list, "post")],
            likes=_id_list(data, "likes", "post"),
            is_public=is_public,
        )

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "comments": [c.to_dict() for c in self.comments],
            "likes": list(self.likes),
        }
        if self.is_public:
            payload["isPublic"] = True
        return payload
