from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Tuple
from glimpse.crud.pagination import paginate
from glimpse.crud.soft_delete import live, tombstone, tombstoned, restore
from glimpse.errors import AlreadyFriends, NotFound, SelfFriend
from glimpse.models.friendship import Friendship
from glimpse.models.user import User
from glimpse.utils.clock import Clock, utcnow
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

class FriendsCRUD:
    """Friendship ledger: directed "owner considers friend_user a friend" records."""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    def _owned(self, owner_id: str, friendship_id: str):
        return self.db.query(Friendship).filter(
            Friendship.owner_id == owner_id,
            Friendship.id == friendship_id
        )

    def list_friends(self, owner_id: str, page: Optional[int] = None, page_size: Optional[int] = None) -> Tuple[List[Friendship], int]:
        """Get live friendships for an owner, newest first, with the friend's profile loaded"""
        query = live(self.db.query(Friendship), Friendship).filter(
            Friendship.owner_id == owner_id
        ).options(
            joinedload(Friendship.friend_user)
        ).order_by(Friendship.created_at.desc(), Friendship.id.desc())
        return paginate(query, page, page_size)

    def get_friend(self, owner_id: str, friendship_id: str) -> Optional[Friendship]:
        return live(self._owned(owner_id, friendship_id), Friendship).options(
            joinedload(Friendship.friend_user)
        ).first()

    def are_friends(self, owner_id: str, friend_user_id: str) -> bool:
        """Check if a live record exists for this exact ordered pair"""
        return live(self.db.query(Friendship), Friendship).filter(
            Friendship.owner_id == owner_id,
            Friendship.friend_user_id == friend_user_id
        ).first() is not None

    def add_friend(self, owner_id: str, friend_user_id: str) -> Friendship:
        """Add friend_user_id to owner's friends."""
        if owner_id == friend_user_id:
            logger.warning(f"User {owner_id} tried to add themselves as a friend")
            raise SelfFriend()

        if self.db.query(User).filter(User.id == friend_user_id).first() is None:
            raise NotFound("User not found")

        if self.are_friends(owner_id, friend_user_id):
            raise AlreadyFriends()

        friendship = Friendship(
            owner_id=owner_id,
            friend_user_id=friend_user_id,
            created_at=self.clock()
        )
        try:
            self.db.add(friendship)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error adding friend: {e}")
            self.db.rollback()
            raise
        self.db.refresh(friendship)
        logger.info(f"Friendship {friendship.id} created: {owner_id} -> {friend_user_id}")
        return friendship

    def remove_friend(self, owner_id: str, friendship_id: str) -> None:
        """Remove a friend (tombstone, recoverable)"""
        friendship = live(self._owned(owner_id, friendship_id), Friendship).first()
        if not friendship:
            raise NotFound("Friend not found")

        tombstone(friendship, self.clock())
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error removing friend: {e}")
            self.db.rollback()
            raise
        logger.info(f"Friendship {friendship_id} removed by {owner_id}")

    def restore_friend(self, owner_id: str, friendship_id: str) -> Friendship:
        """Bring back a removed friendship unless the pair has been re-added since"""
        friendship = tombstoned(self._owned(owner_id, friendship_id), Friendship).first()
        if not friendship:
            raise NotFound("Removed friend not found")

        if self.are_friends(owner_id, friendship.friend_user_id):
            raise AlreadyFriends()

        restore(friendship)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error restoring friend: {e}")
            self.db.rollback()
            raise
        self.db.refresh(friendship)
        logger.info(f"Friendship {friendship_id} restored by {owner_id}")
        return friendship
