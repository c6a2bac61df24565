# social_api/routers/social.py

from fastapi import APIRouter, Depends, status

from social_api.common.deps import get_current_user, get_friend_request_repository, get_user_repository
from social_api.models.friend_request import FriendRequestRead
from social_api.models.user import User, UserRead
from social_api.repositories.friend_requests import FriendRequestRepository
from social_api.repositories.users import UserRepository
from social_api.services import friends

router = APIRouter()


@router.get("/recommendations")
def get_recommendations(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    candidates = friends.recommendations(current_user, users, requests)
    return {
        "message": "Recommended users retrieved successfully",
        "users": [UserRead.model_validate(u) for u in candidates],
    }


@router.get("/friends")
def get_friend_list(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    return {
        "message": "Friends retrieved successfully",
        "friends": [UserRead.model_validate(u) for u in friends.list_friends(current_user, users)],
    }


@router.post("/friend-request/{recipient_id}", status_code=status.HTTP_201_CREATED)
def send_friend_request(
    recipient_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    record = friends.send_request(current_user, recipient_id, users, requests)
    return {"message": "Friend request sent successfully", "friendRequest": FriendRequestRead.from_record(record)}


@router.delete("/cancel-friend-request/{request_id}")
def cancel_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    friends.cancel_request(current_user, request_id, requests)
    return {"message": "Friend request cancelled successfully"}


@router.post("/accept-friend-request/{request_id}")
def accept_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    sender = friends.accept_request(current_user, request_id, users, requests)
    return {"message": "Friend request accepted successfully", "friend": sender}


@router.delete("/reject-friend-request/{request_id}")
def reject_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    sender = friends.reject_request(current_user, request_id, users, requests)
    return {"message": "Friend request rejected successfully", "sender": sender}


@router.get("/friend-requests")
def get_friend_requests(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    incoming = friends.incoming_pending(current_user, users, requests)
    message = "Friend requests retrieved successfully" if incoming else "No friend requests found"
    return {"message": message, "friendRequests": incoming}


@router.get("/getOutgoingFriendRequests")
def get_outgoing_friend_requests(
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    requests: FriendRequestRepository = Depends(get_friend_request_repository),
):
    return {
        "message": "Outgoing friend requests retrieved successfully",
        "outgoingRequests": friends.outgoing_pending(current_user, users, requests),
    }
