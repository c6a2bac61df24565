# social_api/models/friend_request.py

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Index

from social_api.db.base_class import Base, new_id
from social_api.models.user import CamelModel, PublicProfile


class FriendRequestStatus(str, Enum):
    PENDING = "pending"
    # Claimed by the recipient; the friend-set writes may still be in flight
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendRequest(Base):
    __tablename__ = "friend_requests"
    __table_args__ = (
        Index("ix_friend_requests_pair", "sender_id", "recipient_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(16), default=FriendRequestStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class FriendRequestRead(CamelModel):
    id: str
    sender: str
    recipient: str
    status: FriendRequestStatus
    created_at: datetime

    @classmethod
    def from_record(cls, record: FriendRequest) -> "FriendRequestRead":
        return cls(
            id=record.id,
            sender=record.sender_id,
            recipient=record.recipient_id,
            status=record.status,
            created_at=record.created_at,
        )


class IncomingFriendRequest(CamelModel):
    id: str
    sender: PublicProfile
    recipient: str
    status: FriendRequestStatus
    created_at: datetime


class OutgoingFriendRequest(CamelModel):
    id: str
    sender: str
    recipient: PublicProfile
    status: FriendRequestStatus
    created_at: datetime
