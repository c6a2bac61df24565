# social_api/services/friends.py
"""
Friend requests and the friend graph.

Between any two users there is either nothing, one open request, or a
friendship. A request is deleted once it is cancelled, rejected or accepted;
no history is kept. Accepting claims the request first (pending -> accepted),
writes both friend links, and only then deletes the request, so a failed
accept can be retried by the recipient and a concurrent cancel or reject
loses with NotFound.
"""

import logging
from typing import Dict, List, Optional

from social_api.core.errors import Conflict, Forbidden, InvalidInput, NotFound
from social_api.models.friend_request import (
    FriendRequest,
    FriendRequestStatus,
    IncomingFriendRequest,
    OutgoingFriendRequest,
)
from social_api.models.user import PublicProfile, User
from social_api.repositories.friend_requests import FriendRequestRepository
from social_api.repositories.users import UserRepository

logger = logging.getLogger(__name__)

REQUEST_NOT_FOUND = "Friend request not found"


def public_profile(user: Optional[User]) -> Optional[PublicProfile]:
    if user is None:
        return None
    return PublicProfile.model_validate(user)


def _profiles_by_id(users: UserRepository, user_ids) -> Dict[str, PublicProfile]:
    return {u.id: public_profile(u) for u in users.list_by_ids(user_ids)}


def _load_request(requests: FriendRequestRepository, request_id: str) -> FriendRequest:
    record = requests.get(request_id)
    if record is None:
        raise NotFound(REQUEST_NOT_FOUND)
    return record


def send_request(
    current_user: User,
    recipient_id: str,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> FriendRequest:
    if not recipient_id:
        raise InvalidInput("Recipient ID is required")
    if recipient_id == current_user.id:
        raise InvalidInput("You cannot send a friend request to yourself")

    if users.get(recipient_id) is None:
        raise Conflict("Recipient not found")

    if requests.find_open_between(current_user.id, recipient_id) is not None:
        raise Conflict("Friend request already exists")

    if users.has_friend(current_user.id, recipient_id):
        raise Conflict("User is already a friend")

    record = requests.create(sender_id=current_user.id, recipient_id=recipient_id)
    logger.info("Friend request %s sent from %s to %s", record.id, current_user.id, recipient_id)
    return record


def cancel_request(current_user: User, request_id: str, requests: FriendRequestRepository) -> None:
    record = _load_request(requests, request_id)
    if record.sender_id != current_user.id:
        raise Forbidden("You are not authorized to cancel this request")
    if record.status != FriendRequestStatus.PENDING.value:
        raise NotFound(REQUEST_NOT_FOUND)

    if not requests.delete(request_id, status=FriendRequestStatus.PENDING):
        raise NotFound(REQUEST_NOT_FOUND)
    logger.info("Friend request %s cancelled by %s", request_id, current_user.id)


def accept_request(
    current_user: User,
    request_id: str,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> Optional[PublicProfile]:
    """Accept a request addressed to current_user and return the sender's profile."""
    record = _load_request(requests, request_id)
    if record.recipient_id != current_user.id:
        raise Forbidden("You are not authorized to accept this request")

    if record.status == FriendRequestStatus.PENDING.value:
        if not requests.transition(request_id, FriendRequestStatus.PENDING, FriendRequestStatus.ACCEPTED):
            raise NotFound(REQUEST_NOT_FOUND)
    elif record.status != FriendRequestStatus.ACCEPTED.value:
        raise NotFound(REQUEST_NOT_FOUND)
    # An ACCEPTED record here is a previous accept that did not finish; redo it.

    sender_id = record.sender_id
    users.add_friend(current_user.id, sender_id)
    users.add_friend(sender_id, current_user.id)
    requests.delete(request_id)

    logger.info("Friend request %s accepted: %s and %s are now friends", request_id, sender_id, current_user.id)
    return public_profile(users.get(sender_id))


def reject_request(
    current_user: User,
    request_id: str,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> Optional[PublicProfile]:
    record = _load_request(requests, request_id)
    if record.recipient_id != current_user.id:
        raise Forbidden("You are not authorized to reject this request")
    if record.status != FriendRequestStatus.PENDING.value:
        raise NotFound(REQUEST_NOT_FOUND)

    # The delete commits and expires record
    sender_id = record.sender_id
    if not requests.delete(request_id, status=FriendRequestStatus.PENDING):
        raise NotFound(REQUEST_NOT_FOUND)
    logger.info("Friend request %s rejected by %s", request_id, current_user.id)
    return public_profile(users.get(sender_id))


def recommendations(
    current_user: User,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> List[User]:
    """Everyone the user could still send a request to."""
    excluded = {current_user.id}
    excluded |= users.friend_ids(current_user.id)
    excluded |= requests.pending_counterpart_ids(current_user.id)
    return users.list_all_except(excluded)


def list_friends(current_user: User, users: UserRepository) -> List[User]:
    return users.list_by_ids(users.friend_ids(current_user.id))


def incoming_pending(
    current_user: User,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> List[IncomingFriendRequest]:
    # Claimed records stay listed so the recipient can finish the accept
    records = requests.list_open_for_recipient(current_user.id)
    senders = _profiles_by_id(users, [r.sender_id for r in records])
    return [
        IncomingFriendRequest(
            id=r.id,
            sender=senders[r.sender_id],
            recipient=r.recipient_id,
            status=r.status,
            created_at=r.created_at,
        )
        for r in records
        if r.sender_id in senders
    ]


def outgoing_pending(
    current_user: User,
    users: UserRepository,
    requests: FriendRequestRepository,
) -> List[OutgoingFriendRequest]:
    records = requests.list_pending_for_sender(current_user.id)
    recipients = _profiles_by_id(users, [r.recipient_id for r in records])
    return [
        OutgoingFriendRequest(
            id=r.id,
            sender=r.sender_id,
            recipient=recipients[r.recipient_id],
            status=r.status,
            created_at=r.created_at,
        )
        for r in records
        if r.recipient_id in recipients
    ]
