# social_api/routers/posts.py

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from social_api.common.deps import (
    get_current_user,
    get_media_uploader,
    get_post_repository,
    get_settings,
    get_user_repository,
)
from social_api.common.uploads import to_image_upload
from social_api.core.config import Settings
from social_api.integrations.media import MediaUploader
from social_api.models.post import CommentCreate
from social_api.models.user import User
from social_api.repositories.posts import PostRepository
from social_api.repositories.users import UserRepository
from social_api.services import posts as post_service

router = APIRouter()


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_post(
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
    users: UserRepository = Depends(get_user_repository),
    uploader: Optional[MediaUploader] = Depends(get_media_uploader),
    settings: Settings = Depends(get_settings),
):
    image_upload = to_image_upload(image, settings.MAX_UPLOAD_BYTES)
    post = post_service.create_post(current_user, content, image_upload, posts, users, uploader, settings)
    return {"success": True, "post": post}


@router.get("/friends")
def get_friends_posts(
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
    users: UserRepository = Depends(get_user_repository),
):
    return {"success": True, "posts": post_service.friends_feed(current_user, posts, users)}


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
):
    post_service.delete_post(current_user, post_id, posts)
    return {"success": True, "message": "Post deleted successfully"}


@router.post("/like/{post_id}")
def like_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
):
    post_service.like_post(current_user, post_id, posts)
    return {"success": True, "message": "Post liked successfully"}


@router.delete("/unlike/{post_id}")
def unlike_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
):
    post_service.unlike_post(current_user, post_id, posts)
    return {"success": True, "message": "Post unliked successfully"}


@router.post("/comment/{post_id}", status_code=status.HTTP_201_CREATED)
def comment_on_post(
    post_id: str,
    body: CommentCreate,
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
):
    comment = post_service.comment_on_post(current_user, post_id, body.content, posts)
    return {"success": True, "comment": comment}


@router.get("/comments/{post_id}")
def get_post_comments(
    post_id: str,
    current_user: User = Depends(get_current_user),
    posts: PostRepository = Depends(get_post_repository),
    users: UserRepository = Depends(get_user_repository),
):
    return {"success": True, "comments": post_service.post_comments(post_id, posts, users)}
