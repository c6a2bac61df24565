from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from conftest import register
from social_api.core.errors import Internal, NotFound
from social_api.models.friend_request import FriendRequestStatus
from social_api.repositories.friend_requests import FriendRequestRepository
from social_api.repositories.users import UserRepository
from social_api.services import friends


def send(client, sender, recipient):
    return client.post(f"/api/user/friend-request/{recipient[0]['id']}", headers=sender[1])


def test_send_and_accept_makes_both_users_friends(client, alice, bob):
    resp = send(client, alice, bob)
    assert resp.status_code == 201
    request = resp.json()["friendRequest"]
    assert request["sender"] == alice[0]["id"]
    assert request["recipient"] == bob[0]["id"]
    assert request["status"] == "pending"

    incoming = client.get("/api/user/friend-requests", headers=bob[1]).json()["friendRequests"]
    assert [r["id"] for r in incoming] == [request["id"]]
    assert incoming[0]["sender"]["fullName"] == "Alice"

    resp = client.post(f"/api/user/accept-friend-request/{request['id']}", headers=bob[1])
    assert resp.status_code == 200
    assert resp.json()["friend"]["id"] == alice[0]["id"]

    alice_friends = client.get("/api/user/friends", headers=alice[1]).json()["friends"]
    bob_friends = client.get("/api/user/friends", headers=bob[1]).json()["friends"]
    assert [u["id"] for u in alice_friends] == [bob[0]["id"]]
    assert [u["id"] for u in bob_friends] == [alice[0]["id"]]

    me = client.get("/api/user/getMe", headers=alice[1]).json()["user"]
    assert me["friends"] == [bob[0]["id"]]

    after = client.get("/api/user/friend-requests", headers=bob[1]).json()
    assert after == {"message": "No friend requests found", "friendRequests": []}
    assert client.get("/api/user/getOutgoingFriendRequests", headers=alice[1]).json()["outgoingRequests"] == []


def test_sending_twice_conflicts(client, alice, bob):
    assert send(client, alice, bob).status_code == 201
    resp = send(client, alice, bob)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Friend request already exists"}


def test_sending_back_while_pending_conflicts(client, alice, bob):
    assert send(client, alice, bob).status_code == 201
    resp = send(client, bob, alice)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Friend request already exists"}


def test_sending_to_a_friend_conflicts(client, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    client.post(f"/api/user/accept-friend-request/{request_id}", headers=bob[1])

    for sender, recipient in ((alice, bob), (bob, alice)):
        resp = send(client, sender, recipient)
        assert resp.status_code == 400
        assert resp.json() == {"message": "User is already a friend"}


def test_sending_to_unknown_user_conflicts(client, alice):
    resp = client.post("/api/user/friend-request/does-not-exist", headers=alice[1])
    assert resp.status_code == 400
    assert resp.json() == {"message": "Recipient not found"}


def test_sending_to_self_is_invalid(client, alice):
    resp = send(client, alice, alice)
    assert resp.status_code == 400


def test_only_sender_may_cancel(client, alice, bob, carol):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]

    for outsider in (bob, carol):
        resp = client.delete(f"/api/user/cancel-friend-request/{request_id}", headers=outsider[1])
        assert resp.status_code == 403

    resp = client.delete(f"/api/user/cancel-friend-request/{request_id}", headers=alice[1])
    assert resp.status_code == 200
    assert client.get("/api/user/friend-requests", headers=bob[1]).json()["friendRequests"] == []
    # Back to no relation: a new request is allowed
    assert send(client, bob, alice).status_code == 201


def test_only_recipient_may_accept_or_reject(client, alice, bob, carol):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]

    for actor in (alice, carol):
        assert client.post(f"/api/user/accept-friend-request/{request_id}", headers=actor[1]).status_code == 403
        assert client.delete(f"/api/user/reject-friend-request/{request_id}", headers=actor[1]).status_code == 403

    assert client.get("/api/user/friends", headers=alice[1]).json()["friends"] == []


def test_reject_deletes_request_without_friendship(client, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    resp = client.delete(f"/api/user/reject-friend-request/{request_id}", headers=bob[1])
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Friend request rejected successfully"
    assert body["sender"] == {
        "id": alice[0]["id"],
        "fullName": "Alice",
        "profilePicture": alice[0]["profilePicture"],
    }
    assert client.get("/api/user/friend-requests", headers=bob[1]).json()["friendRequests"] == []

    assert client.get("/api/user/friends", headers=bob[1]).json()["friends"] == []
    assert client.get("/api/user/getOutgoingFriendRequests", headers=alice[1]).json()["outgoingRequests"] == []
    assert send(client, alice, bob).status_code == 201


@pytest.mark.parametrize("method, path", [
    ("post", "/api/user/accept-friend-request/{}"),
    ("delete", "/api/user/reject-friend-request/{}"),
    ("delete", "/api/user/cancel-friend-request/{}"),
])
def test_resolving_unknown_request_is_not_found(client, alice, method, path):
    resp = getattr(client, method)(path.format("missing-id"), headers=alice[1])
    assert resp.status_code == 404
    assert resp.json() == {"message": "Friend request not found"}


def test_resolving_already_resolved_request_is_not_found(client, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    assert client.post(f"/api/user/accept-friend-request/{request_id}", headers=bob[1]).status_code == 200

    assert client.post(f"/api/user/accept-friend-request/{request_id}", headers=bob[1]).status_code == 404
    assert client.delete(f"/api/user/reject-friend-request/{request_id}", headers=bob[1]).status_code == 404
    assert client.delete(f"/api/user/cancel-friend-request/{request_id}", headers=alice[1]).status_code == 404


def test_outgoing_requests_carry_recipient_profile(client, alice, bob, carol):
    send(client, alice, bob)
    send(client, alice, carol)
    outgoing = client.get("/api/user/getOutgoingFriendRequests", headers=alice[1]).json()["outgoingRequests"]
    assert {r["recipient"]["fullName"] for r in outgoing} == {"Bob", "Carol"}
    assert all(r["sender"] == alice[0]["id"] for r in outgoing)
    assert all(set(r["recipient"]) == {"id", "fullName", "profilePicture"} for r in outgoing)


def test_recommendations_exclude_self_friends_and_pending(client, alice, bob, carol):
    dave = register(client, "Dave", "d@x.com")
    erin = register(client, "Erin", "e@x.com")

    # bob becomes a friend, carol has a pending request from alice, dave sent one to alice
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    client.post(f"/api/user/accept-friend-request/{request_id}", headers=bob[1])
    send(client, alice, carol)
    send(client, dave, alice)

    resp = client.get("/api/user/recommendations", headers=alice[1])
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()["users"]] == [erin[0]["id"]]


def test_recommendations_may_be_empty(client, alice):
    resp = client.get("/api/user/recommendations", headers=alice[1])
    assert resp.status_code == 200
    assert resp.json()["users"] == []


def test_friend_routes_require_session(client):
    assert client.get("/api/user/friends").status_code == 401
    assert client.post("/api/user/friend-request/anyone").status_code == 401


# --- engine-level behaviour ---

def _user(db, user_id):
    return UserRepository(db).get(user_id)


def test_interrupted_accept_can_be_retried(client, db, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    users, requests = UserRepository(db), FriendRequestRepository(db)

    # First attempt claimed the request and wrote one link before failing
    assert requests.transition(request_id, FriendRequestStatus.PENDING, FriendRequestStatus.ACCEPTED)
    users.add_friend(bob[0]["id"], alice[0]["id"])

    # Meanwhile the pair cannot start a new request
    assert send(client, alice, bob).status_code == 400

    resp = client.post(f"/api/user/accept-friend-request/{request_id}", headers=bob[1])
    assert resp.status_code == 200
    assert users.friend_ids(alice[0]["id"]) == {bob[0]["id"]}
    assert users.friend_ids(bob[0]["id"]) == {alice[0]["id"]}
    assert requests.get(request_id) is None


def test_cancel_loses_against_claimed_accept(client, db, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    requests = FriendRequestRepository(db)
    assert requests.transition(request_id, FriendRequestStatus.PENDING, FriendRequestStatus.ACCEPTED)

    resp = client.delete(f"/api/user/cancel-friend-request/{request_id}", headers=alice[1])
    assert resp.status_code == 404


def test_accept_loses_against_completed_cancel(db, client, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    users, requests = UserRepository(db), FriendRequestRepository(db)
    sender = _user(db, alice[0]["id"])
    recipient = _user(db, bob[0]["id"])

    friends.cancel_request(sender, request_id, requests)
    with pytest.raises(NotFound):
        friends.accept_request(recipient, request_id, users, requests)
    assert users.friend_ids(recipient.id) == set()


def test_friend_set_add_is_idempotent(db, alice, bob):
    users = UserRepository(db)
    assert users.add_friend(alice[0]["id"], bob[0]["id"]) is True
    assert users.add_friend(alice[0]["id"], bob[0]["id"]) is False
    assert users.friend_ids(alice[0]["id"]) == {bob[0]["id"]}


def test_store_failures_surface_as_internal():
    db = Mock()
    db.get.side_effect = OperationalError("SELECT", {}, Exception("database is gone"))
    requests = FriendRequestRepository(db)
    with pytest.raises(Internal):
        requests.get("any")
    db.rollback.assert_called_once()


def test_claimed_accept_stays_visible_and_can_be_finished(client, db, alice, bob):
    request_id = send(client, alice, bob).json()["friendRequest"]["id"]
    users, requests = UserRepository(db), FriendRequestRepository(db)

    # An accept that claimed the request and wrote one link, then died
    assert requests.transition(request_id, FriendRequestStatus.PENDING, FriendRequestStatus.ACCEPTED)
    users.add_friend(bob[0]["id"], alice[0]["id"])

    incoming = client.get("/api/user/friend-requests", headers=bob[1]).json()["friendRequests"]
    assert [(r["id"], r["status"]) for r in incoming] == [(request_id, "accepted")]

    resp = client.post(f"/api/user/accept-friend-request/{incoming[0]['id']}", headers=bob[1])
    assert resp.status_code == 200

    alice_friends = client.get("/api/user/friends", headers=alice[1]).json()["friends"]
    bob_friends = client.get("/api/user/friends", headers=bob[1]).json()["friends"]
    assert [u["id"] for u in alice_friends] == [bob[0]["id"]]
    assert [u["id"] for u in bob_friends] == [alice[0]["id"]]
    assert client.get("/api/user/friend-requests", headers=bob[1]).json()["friendRequests"] == []
