# social_api/models/post.py

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Index

from social_api.db.base_class import Base, new_id
from social_api.models.user import CamelModel, PublicProfile

MAX_POST_LENGTH = 1000


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=new_id)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class CommentCreate(CamelModel):
    content: Optional[str] = None


class LikerProfile(CamelModel):
    id: str
    full_name: str


class LikeRead(CamelModel):
    id: str
    user: LikerProfile
    created_at: datetime


class CommentRead(CamelModel):
    id: str
    post: str
    user: PublicProfile
    content: str
    created_at: datetime


class PostRead(CamelModel):
    id: str
    user: PublicProfile
    content: Optional[str] = None
    image: Optional[str] = None
    likes: List[LikeRead] = []
    comments: List[CommentRead] = []
    created_at: datetime
