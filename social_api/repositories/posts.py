# social_api/repositories/posts.py

from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from social_api.models.post import Post, Like, Comment
from social_api.repositories.base import Repository, store_operation


class PostRepository(Repository):

    @store_operation
    def get(self, post_id: str) -> Optional[Post]:
        return self.db.get(Post, post_id)

    @store_operation
    def create(self, user_id: str, content: Optional[str], image: Optional[str]) -> Post:
        post = Post(user_id=user_id, content=content, image=image)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        return post

    @store_operation
    def delete(self, post_id: str) -> bool:
        self.db.query(Like).filter(Like.post_id == post_id).delete(synchronize_session=False)
        self.db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
        deleted = self.db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted == 1

    @store_operation
    def latest_by_authors(self, user_ids: Iterable[str], limit: int = 20) -> List[Post]:
        ids = list(set(user_ids))
        if not ids:
            return []
        return (
            self.db.query(Post)
            .filter(Post.user_id.in_(ids))
            .order_by(Post.created_at.desc(), Post.id)
            .limit(limit)
            .all()
        )

    # --- likes ---

    @store_operation
    def add_like(self, post_id: str, user_id: str) -> Optional[Like]:
        """Returns None when the user already likes the post."""
        if self.db.query(Like).filter(Like.post_id == post_id, Like.user_id == user_id).first():
            return None
        like = Like(post_id=post_id, user_id=user_id)
        self.db.add(like)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(like)
        return like

    @store_operation
    def remove_like(self, post_id: str, user_id: str) -> bool:
        deleted = self.db.query(Like).filter(
            Like.post_id == post_id,
            Like.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    @store_operation
    def likes_for(self, post_ids: Iterable[str]) -> List[Like]:
        ids = list(set(post_ids))
        if not ids:
            return []
        return self.db.query(Like).filter(Like.post_id.in_(ids)).order_by(Like.created_at).all()

    # --- comments ---

    @store_operation
    def add_comment(self, post_id: str, user_id: str, content: str) -> Comment:
        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    @store_operation
    def comments_for(self, post_ids: Iterable[str]) -> List[Comment]:
        ids = list(set(post_ids))
        if not ids:
            return []
        return (
            self.db.query(Comment)
            .filter(Comment.post_id.in_(ids))
            .order_by(Comment.created_at, Comment.id)
            .all()
        )
