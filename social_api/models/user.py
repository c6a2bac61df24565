# social_api/models/user.py

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from social_api.db.base_class import Base, new_id

DEFAULT_AVATAR = "https://www.shutterstock.com/image-vector/vector-flat-illustration-grayscale-avatar-600nw-2264922221.jpg"
DEFAULT_BIO = "Hello, I am using ShuvoMedia!"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class RelationshipStatus(str, Enum):
    SINGLE = "Single"
    IN_A_RELATIONSHIP = "In a relationship"
    MARRIED = "Married"
    COMPLICATED = "Complicated"
    UNSPECIFIED = ""


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)

    profile_picture = Column(String(500), default=DEFAULT_AVATAR)
    bio = Column(Text, default=DEFAULT_BIO)
    school = Column(String(200), nullable=True)
    college = Column(String(200), nullable=True)
    relationship_status = Column(String(32), default=RelationshipStatus.UNSPECIFIED.value)
    role = Column(String(16), default=Role.USER.value, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    friend_links = relationship(
        "Friendship",
        foreign_keys="Friendship.user_id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def friends(self) -> List[str]:
        return [link.friend_id for link in self.friend_links]


class Friendship(Base):
    """One direction of a friendship; accepting a request writes both."""
    __tablename__ = "friendships"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    friend_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)


# --- API schemas ---

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RegisterRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Partial profile update: a field left as None is not touched."""
    full_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    school: Optional[str] = None
    college: Optional[str] = None
    relationship_status: Optional[RelationshipStatus] = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.full_name,
                self.bio,
                self.profile_picture,
                self.school,
                self.college,
                self.relationship_status,
            )
        )


class PublicProfile(CamelModel):
    id: str
    full_name: str
    profile_picture: Optional[str] = None


class UserRead(CamelModel):
    id: str
    email: str
    full_name: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    school: Optional[str] = None
    college: Optional[str] = None
    relationship_status: Optional[str] = None
    role: str
    friends: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
