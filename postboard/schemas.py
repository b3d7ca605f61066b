"""Request bodies. Wire names are camelCase; attributes are snake_case."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from postboard.domain.models import Role


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_Body):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    mobile: str = Field(..., min_length=1)


class LoginRequest(_Body):
    email: str
    password: str


class CreatePostRequest(_Body):
    user_id: str = Field(..., alias="userId")
    title: str
    description: str


class ListPostsRequest(_Body):
    user_id: str = Field(..., alias="userId")


class AddCommentRequest(_Body):
    post_id: str = Field(..., alias="postId")
    user_id: str = Field(..., alias="userId")
    comment_text: str = Field(..., alias="commentText")


class EditPostRequest(_Body):
    post_id: str = Field(..., alias="postId")
    user_id: str = Field(..., alias="userId")
    title: str
    description: str


class DeletePostRequest(_Body):
    post_id: str = Field(..., alias="postId")
    user_id: str = Field(..., alias="userId")
    user_role: str = Field(Role.USER.value, alias="userRole")


class LikePostRequest(_Body):
    post_id: str = Field(..., alias="postId")
    user_id: str = Field(..., alias="userId")
