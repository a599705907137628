from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session, joinedload
from typing import Dict, List, NamedTuple, Optional, Tuple
from glimpse.crud.message import observe, observe_all
from glimpse.crud.pagination import paginate
from glimpse.crud.soft_delete import live
from glimpse.models.message import Message
from glimpse.models.user import User
from glimpse.utils.clock import Clock, utcnow


class ChatPreview(NamedTuple):
    counterpart_id: str
    counterpart: Optional[User]
    message: Message
    unread_count: int


class ConversationsCRUD:
    """Read-only projections over messages: threads, inbox and chat-list previews."""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    def _live(self):
        return live(self.db.query(Message), Message)

    def _involving(self, user_id: str):
        return self._live().filter(
            or_(Message.sender_id == user_id, Message.recipient_id == user_id)
        )

    def get_conversation(
        self,
        user_id: str,
        friend_id: str,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Message], int]:
        """Messages between the pair in either direction, oldest first"""
        query = self._live().filter(
            or_(
                and_(Message.sender_id == user_id, Message.recipient_id == friend_id),
                and_(Message.sender_id == friend_id, Message.recipient_id == user_id)
            )
        ).options(
            joinedload(Message.image)
        ).order_by(Message.created_at.asc(), Message.id.asc())
        messages, total = paginate(query, page, page_size)
        return observe_all(messages, self.clock()), total

    def get_all_messages(
        self,
        user_id: str,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Message], int]:
        """Every message the user sent or received, newest first"""
        query = self._involving(user_id).options(joinedload(Message.image)).order_by(Message.created_at.desc(), Message.id.desc())
        messages, total = paginate(query, page, page_size)
        return observe_all(messages, self.clock()), total

    def latest_per_friend(self, user_id: str) -> Dict[str, Message]:
        """
        Most recent message per counterpart, newest conversation first.

        Ranks each counterpart's messages with a window function; equal
        timestamps are broken by the higher message id.
        """
        counterpart = case(
            (Message.sender_id == user_id, Message.recipient_id),
            else_=Message.sender_id
        )
        ranked = self._involving(user_id).with_entities(
            Message.id.label("message_id"),
            func.row_number().over(
                partition_by=counterpart,
                order_by=(Message.created_at.desc(), Message.id.desc())
            ).label("recency")
        ).subquery()

        newest_ids = select(ranked.c.message_id).where(ranked.c.recency == 1)
        messages = self.db.query(Message).filter(
            Message.id.in_(newest_ids)
        ).options(
            joinedload(Message.image)
        ).order_by(Message.created_at.desc(), Message.id.desc()).all()

        now = self.clock()
        return {message.counterpart_of(user_id): observe(message, now) for message in messages}

    def unread_counts(self, user_id: str) -> Dict[str, int]:
        """Unread received messages per sender"""
        rows = self._live().filter(
            Message.recipient_id == user_id,
            Message.is_read.is_(False)
        ).with_entities(
            Message.sender_id, func.count(Message.id)
        ).group_by(Message.sender_id).all()
        return {sender_id: count for sender_id, count in rows}

    def chat_previews(self, user_id: str) -> List[ChatPreview]:
        """Chat-list rows: counterpart profile, latest message and unread count"""
        latest = self.latest_per_friend(user_id)
        if not latest:
            return []

        unread = self.unread_counts(user_id)
        users = {
            user.id: user
            for user in self.db.query(User).filter(User.id.in_(list(latest.keys()))).all()
        }
        return [
            ChatPreview(
                counterpart_id=counterpart_id,
                counterpart=users.get(counterpart_id),
                message=message,
                unread_count=unread.get(counterpart_id, 0),
            )
            for counterpart_id, message in latest.items()
        ]
