# social_api/models/group.py

from datetime import datetime
from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from social_api.db.base_class import Base, new_id
from social_api.models.user import CamelModel, PublicProfile

DEFAULT_GROUP_IMAGE = "https://www.shutterstock.com/image-vector/vector-flat-illustration-grayscale-group-avatar-600nw-2264922221.jpg"


class ChatGroup(Base):
    __tablename__ = "chat_groups"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    image = Column(String(500), default=DEFAULT_GROUP_IMAGE)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    member_links = relationship(
        "ChatGroupMember",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def member_ids(self) -> List[str]:
        return [link.user_id for link in self.member_links]


class ChatGroupMember(Base):
    __tablename__ = "chat_group_members"

    group_id = Column(String(36), ForeignKey("chat_groups.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)


class GroupRead(CamelModel):
    id: str
    name: str
    image: str
    created_by: str
    members: List[PublicProfile] = []
    created_at: datetime
    updated_at: datetime
