# social_api/services/posts.py

import logging
from typing import List, Optional

from social_api.core.config import Settings
from social_api.core.errors import Conflict, Forbidden, InvalidInput, NotFound
from social_api.integrations.media import MediaUploader, POST_FOLDER
from social_api.models.post import (
    MAX_POST_LENGTH,
    CommentRead,
    LikeRead,
    LikerProfile,
    Post,
    PostRead,
)
from social_api.models.user import User
from social_api.repositories.posts import PostRepository
from social_api.repositories.users import UserRepository
from social_api.services.friends import public_profile
from social_api.services.images import ImageUpload, store_image

logger = logging.getLogger(__name__)

FEED_SIZE = 20


def _load_post(posts: PostRepository, post_id: str) -> Post:
    post = posts.get(post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def _assemble(post_list: List[Post], posts: PostRepository, users: UserRepository) -> List[PostRead]:
    """Attach author, likes and comments to each post with one batch query per kind."""
    post_ids = [p.id for p in post_list]
    likes = posts.likes_for(post_ids)
    comments = posts.comments_for(post_ids)

    user_ids = {p.user_id for p in post_list}
    user_ids.update(like.user_id for like in likes)
    user_ids.update(c.user_id for c in comments)
    people = {u.id: u for u in users.list_by_ids(user_ids)}

    likes_by_post = {}
    for like in likes:
        liker = people.get(like.user_id)
        if liker is None:
            continue
        likes_by_post.setdefault(like.post_id, []).append(
            LikeRead(id=like.id, user=LikerProfile.model_validate(liker), created_at=like.created_at)
        )

    comments_by_post = {}
    for c in comments:
        author = people.get(c.user_id)
        if author is None:
            continue
        comments_by_post.setdefault(c.post_id, []).append(
            CommentRead(id=c.id, post=c.post_id, user=public_profile(author), content=c.content,
                        created_at=c.created_at)
        )

    result = []
    for p in post_list:
        author = people.get(p.user_id)
        if author is None:
            continue
        result.append(PostRead(
            id=p.id,
            user=public_profile(author),
            content=p.content,
            image=p.image,
            likes=likes_by_post.get(p.id, []),
            comments=comments_by_post.get(p.id, []),
            created_at=p.created_at,
        ))
    return result


def create_post(
    current_user: User,
    content: Optional[str],
    image: Optional[ImageUpload],
    posts: PostRepository,
    users: UserRepository,
    uploader: Optional[MediaUploader],
    settings: Settings,
) -> PostRead:
    content = content.strip() if content else None
    if content and len(content) > MAX_POST_LENGTH:
        raise InvalidInput(f"Content must be {MAX_POST_LENGTH} characters or less")
    if not content and image is None:
        raise InvalidInput("Content or image is required")

    image_url = store_image(image, POST_FOLDER, uploader, settings)
    post = posts.create(current_user.id, content or None, image_url)
    logger.info("User %s created post %s", current_user.id, post.id)
    return _assemble([post], posts, users)[0]


def friends_feed(current_user: User, posts: PostRepository, users: UserRepository) -> List[PostRead]:
    authors = users.friend_ids(current_user.id) | {current_user.id}
    return _assemble(posts.latest_by_authors(authors, limit=FEED_SIZE), posts, users)


def delete_post(current_user: User, post_id: str, posts: PostRepository) -> None:
    post = _load_post(posts, post_id)
    if post.user_id != current_user.id:
        raise Forbidden("Unauthorized to delete this post")
    if not posts.delete(post_id):
        raise NotFound("Post not found")
    logger.info("User %s deleted post %s", current_user.id, post_id)


def like_post(current_user: User, post_id: str, posts: PostRepository) -> None:
    _load_post(posts, post_id)
    if posts.add_like(post_id, current_user.id) is None:
        raise Conflict("Post already liked")


def unlike_post(current_user: User, post_id: str, posts: PostRepository) -> None:
    if not posts.remove_like(post_id, current_user.id):
        raise Conflict("Post not liked")


def comment_on_post(
    current_user: User,
    post_id: str,
    content: Optional[str],
    posts: PostRepository,
) -> CommentRead:
    content = (content or "").strip()
    if not content:
        raise InvalidInput("Comment content is required")
    _load_post(posts, post_id)

    comment = posts.add_comment(post_id, current_user.id, content)
    return CommentRead(
        id=comment.id,
        post=comment.post_id,
        user=public_profile(current_user),
        content=comment.content,
        created_at=comment.created_at,
    )


def post_comments(post_id: str, posts: PostRepository, users: UserRepository) -> List[CommentRead]:
    _load_post(posts, post_id)
    comments = posts.comments_for([post_id])
    people = {u.id: u for u in users.list_by_ids(c.user_id for c in comments)}
    return [
        CommentRead(id=c.id, post=c.post_id, user=public_profile(people[c.user_id]), content=c.content,
                    created_at=c.created_at)
        for c in comments
        if c.user_id in people
    ]
