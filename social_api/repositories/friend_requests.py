# social_api/repositories/friend_requests.py

from typing import List, Optional, Set

from sqlalchemy import and_, or_

from social_api.models.friend_request import FriendRequest, FriendRequestStatus
from social_api.repositories.base import Repository, store_operation

# Requests that still block a new one between the same two users
OPEN_STATUSES = (FriendRequestStatus.PENDING.value, FriendRequestStatus.ACCEPTED.value)


class FriendRequestRepository(Repository):

    @store_operation
    def get(self, request_id: str) -> Optional[FriendRequest]:
        return self.db.get(FriendRequest, request_id)

    @store_operation
    def find_open_between(self, user_a: str, user_b: str) -> Optional[FriendRequest]:
        return self.db.query(FriendRequest).filter(
            or_(
                and_(FriendRequest.sender_id == user_a, FriendRequest.recipient_id == user_b),
                and_(FriendRequest.sender_id == user_b, FriendRequest.recipient_id == user_a),
            ),
            FriendRequest.status.in_(OPEN_STATUSES),
        ).first()

    @store_operation
    def create(self, sender_id: str, recipient_id: str) -> FriendRequest:
        record = FriendRequest(
            sender_id=sender_id,
            recipient_id=recipient_id,
            status=FriendRequestStatus.PENDING.value,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    @store_operation
    def transition(self, request_id: str, from_status: FriendRequestStatus, to_status: FriendRequestStatus) -> bool:
        """Move a request between states only if it is still in from_status."""
        updated = self.db.query(FriendRequest).filter(
            FriendRequest.id == request_id,
            FriendRequest.status == from_status.value,
        ).update({FriendRequest.status: to_status.value}, synchronize_session=False)
        self.db.commit()
        return updated == 1

    @store_operation
    def delete(self, request_id: str, status: Optional[FriendRequestStatus] = None) -> bool:
        """Delete a request, optionally only while it is in the given status."""
        query = self.db.query(FriendRequest).filter(FriendRequest.id == request_id)
        if status is not None:
            query = query.filter(FriendRequest.status == status.value)
        deleted = query.delete(synchronize_session=False)
        self.db.commit()
        return deleted == 1

    @store_operation
    def list_open_for_recipient(self, user_id: str) -> List[FriendRequest]:
        """Pending requests plus claimed accepts that never finished."""
        return self.db.query(FriendRequest).filter(
            FriendRequest.recipient_id == user_id,
            FriendRequest.status.in_(OPEN_STATUSES),
        ).order_by(FriendRequest.created_at).all()

    @store_operation
    def list_pending_for_sender(self, user_id: str) -> List[FriendRequest]:
        return self.db.query(FriendRequest).filter(
            FriendRequest.sender_id == user_id,
            FriendRequest.status == FriendRequestStatus.PENDING.value,
        ).order_by(FriendRequest.created_at).all()

    @store_operation
    def pending_counterpart_ids(self, user_id: str) -> Set[str]:
        rows = self.db.query(FriendRequest.sender_id, FriendRequest.recipient_id).filter(
            or_(FriendRequest.sender_id == user_id, FriendRequest.recipient_id == user_id),
            FriendRequest.status.in_(OPEN_STATUSES),
        ).all()
        return {recipient if sender == user_id else sender for sender, recipient in rows}
