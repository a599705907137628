"""
Tests for the friendship ledger.

Covers:
- Adding friends and the duplicate / self / unknown-user rejections
- Directed records (adding bob does not make alice bob's friend)
- Tombstone removal and restore
- Pagination of the friends list
- The /friends routes
"""

import pytest

from glimpse.crud.friends import FriendsCRUD
from glimpse.errors import AlreadyFriends, NotFound, SelfFriend
from glimpse.models import Friendship


@pytest.fixture
def friends(db, users, clock):
    return FriendsCRUD(db, clock=clock)


class TestFriendsLedger:
    def test_add_friend_creates_live_record(self, friends, clock):
        friendship = friends.add_friend("alice", "bob")

        assert friendship.id
        assert friendship.owner_id == "alice"
        assert friendship.friend_user_id == "bob"
        assert friendship.created_at == clock()
        assert friendship.deleted_at is None
        assert friends.are_friends("alice", "bob")

    def test_adding_same_friend_twice_fails(self, friends):
        friends.add_friend("alice", "bob")

        with pytest.raises(AlreadyFriends):
            friends.add_friend("alice", "bob")

    def test_cannot_add_self(self, friends, db):
        with pytest.raises(SelfFriend):
            friends.add_friend("alice", "alice")
        assert db.query(Friendship).count() == 0

    def test_cannot_add_unknown_user(self, friends):
        with pytest.raises(NotFound):
            friends.add_friend("alice", "nobody")

    def test_friendship_is_directed(self, friends):
        friends.add_friend("alice", "bob")

        assert friends.are_friends("alice", "bob")
        assert not friends.are_friends("bob", "alice")
        # bob can still add alice independently
        reverse = friends.add_friend("bob", "alice")
        assert reverse.owner_id == "bob"

    def test_list_friends_newest_first_with_profiles(self, friends, clock):
        friends.add_friend("alice", "bob")
        clock.advance(1)
        friends.add_friend("alice", "carol")

        items, total = friends.list_friends("alice")

        assert total == 2
        assert [f.friend_user_id for f in items] == ["carol", "bob"]
        assert items[0].friend_user.display_name == "Carol King"

    def test_list_friends_pagination(self, friends, clock):
        friends.add_friend("alice", "bob")
        clock.advance(1)
        friends.add_friend("alice", "carol")

        page_one, total = friends.list_friends("alice", page=1, page_size=1)
        page_two, _ = friends.list_friends("alice", page=2, page_size=1)

        assert total == 2
        assert [f.friend_user_id for f in page_one] == ["carol"]
        assert [f.friend_user_id for f in page_two] == ["bob"]

    def test_remove_friend_tombstones_record(self, friends, db, clock):
        friendship = friends.add_friend("alice", "bob")
        clock.advance(5)

        friends.remove_friend("alice", friendship.id)

        assert not friends.are_friends("alice", "bob")
        assert friends.get_friend("alice", friendship.id) is None
        assert friends.list_friends("alice") == ([], 0)
        stored = db.query(Friendship).filter(Friendship.id == friendship.id).one()
        assert stored.deleted_at == clock()

    def test_remove_requires_owner(self, friends):
        friendship = friends.add_friend("alice", "bob")

        with pytest.raises(NotFound):
            friends.remove_friend("bob", friendship.id)
        assert friends.are_friends("alice", "bob")

    def test_remove_twice_fails(self, friends):
        friendship = friends.add_friend("alice", "bob")
        friends.remove_friend("alice", friendship.id)

        with pytest.raises(NotFound):
            friends.remove_friend("alice", friendship.id)

    def test_readd_after_remove_creates_new_record(self, friends):
        first = friends.add_friend("alice", "bob")
        friends.remove_friend("alice", first.id)

        second = friends.add_friend("alice", "bob")

        assert second.id != first.id
        assert friends.are_friends("alice", "bob")

    def test_restore_clears_tombstone(self, friends):
        friendship = friends.add_friend("alice", "bob")
        friends.remove_friend("alice", friendship.id)

        restored = friends.restore_friend("alice", friendship.id)

        assert restored.id == friendship.id
        assert restored.deleted_at is None
        assert friends.are_friends("alice", "bob")

    def test_restore_live_friendship_fails(self, friends):
        friendship = friends.add_friend("alice", "bob")

        with pytest.raises(NotFound):
            friends.restore_friend("alice", friendship.id)

    def test_restore_when_pair_was_readded_fails(self, friends):
        first = friends.add_friend("alice", "bob")
        friends.remove_friend("alice", first.id)
        friends.add_friend("alice", "bob")

        with pytest.raises(AlreadyFriends):
            friends.restore_friend("alice", first.id)


class TestFriendsRoutes:
    def test_add_and_list(self, client, as_user):
        response = client.post("/friends", json={"friend_user_id": "bob"}, headers=as_user("alice"))
        assert response.status_code == 201
        body = response.json()
        assert body["friend_user_id"] == "bob"
        assert body["friend"]["username"] == "bob"
        assert body["friend"]["initials"] == "BJ"

        response = client.get("/friends", headers=as_user("alice"))
        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 1
        assert data["friends"][0]["id"] == body["id"]

    def test_duplicate_add_is_conflict(self, client, as_user):
        client.post("/friends", json={"friend_user_id": "bob"}, headers=as_user("alice"))

        response = client.post("/friends", json={"friend_user_id": "bob"}, headers=as_user("alice"))

        assert response.status_code == 409
        assert response.json()["code"] == "already_friends"

    def test_self_add_is_rejected(self, client, as_user):
        response = client.post("/friends", json={"friend_user_id": "alice"}, headers=as_user("alice"))

        assert response.status_code == 422
        assert response.json()["code"] == "self_friend"

    def test_unknown_user_is_not_found(self, client, as_user):
        response = client.post("/friends", json={"friend_user_id": "nobody"}, headers=as_user("alice"))

        assert response.status_code == 404

    def test_remove_and_restore(self, client, as_user):
        created = client.post("/friends", json={"friend_user_id": "bob"}, headers=as_user("alice")).json()

        response = client.delete(f"/friends/{created['id']}", headers=as_user("alice"))
        assert response.status_code == 200
        assert response.json()["status"] == "removed"
        assert client.get(f"/friends/{created['id']}", headers=as_user("alice")).status_code == 404

        response = client.post(f"/friends/{created['id']}/restore", headers=as_user("alice"))
        assert response.status_code == 200
        assert client.get(f"/friends/{created['id']}", headers=as_user("alice")).status_code == 200

    def test_other_users_friendship_is_hidden(self, client, as_user):
        created = client.post("/friends", json={"friend_user_id": "bob"}, headers=as_user("alice")).json()

        assert client.get(f"/friends/{created['id']}", headers=as_user("carol")).status_code == 404
        assert client.delete(f"/friends/{created['id']}", headers=as_user("carol")).status_code == 404
