from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from postboard.domain.errors import PermissionDeniedError, PostNotFoundError, UserNotFoundError
from postboard.repositories.posts import PostRepository
from postboard.schemas import (
    AddCommentRequest,
    CreatePostRequest,
    DeletePostRequest,
    EditPostRequest,
    LikePostRequest,
    ListPostsRequest,
)

router = APIRouter(tags=["posts"])


def _posts(request: Request) -> PostRepository:
    repo = getattr(getattr(request.app, "state", None), "posts", None)
    if not repo:
        raise RuntimeError("PostRepository not configured")
    return repo


def _message(text: str, status_code: int) -> JSONResponse:
    return JSONResponse({"message": text}, status_code=status_code)


@router.post("/createPost", status_code=201)
def create_post(body: CreatePostRequest, request: Request):
    try:
        post = _posts(request).create(body.user_id, body.title, body.description)
    except UserNotFoundError as exc:
        return _message(exc.message, 404)
    return {"message": "Post created", "post": post.to_dict()}


@router.post("/posts")
def list_posts(body: ListPostsRequest, request: Request):
    return [p.to_dict() for p in _posts(request).list_visible(body.user_id)]


@router.post("/addComment", status_code=201)
def add_comment(body: AddCommentRequest, request: Request):
    try:
        _posts(request).add_comment(body.post_id, body.user_id, body.comment_text)
    except PostNotFoundError as exc:
        return _message(exc.message, 404)
    return {"message": "Comment added"}


@router.post("/editPost")
def edit_post(body: EditPostRequest, request: Request):
    # Missing post and foreign post share one response.
    try:
        post = _posts(request).edit(body.post_id, body.user_id, body.title, body.description)
    except (PostNotFoundError, PermissionDeniedError):
        return _message("Permission denied or post not found", 403)
    return {"message": "Post updated", "post": post.to_dict()}


@router.post("/deletePost")
def delete_post(body: DeletePostRequest, request: Request):
    try:
        _posts(request).delete(body.post_id, body.user_id, body.user_role)
    except (PostNotFoundError, PermissionDeniedError):
        return _message("Permission denied", 403)
    return {"message": "Post deleted"}


@router.post("/likePost")
def like_post(body: LikePostRequest, request: Request):
    try:
        count = _posts(request).toggle_like(body.post_id, body.user_id)
    except PostNotFoundError as exc:
        return _message(exc.message, 404)
    return {"message": "Post liked/unliked", "likesCount": count}
