from datetime import datetime, timedelta
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Iterable, List, Optional
from glimpse.config import settings
from glimpse.crud.images import ImagesCRUD
from glimpse.crud.soft_delete import live, tombstone
from glimpse.errors import (
    ImageNotOwned,
    InvalidContent,
    InvalidRecipient,
    MessageExpired,
    NotAnImageMessage,
    NotFoundOrUnauthorized,
)
from glimpse.models.message import Message, MessageKind, MessageStatus
from glimpse.models.user import User
from glimpse.utils.clock import Clock, utcnow
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)


def observe(message: Message, now: datetime) -> Message:
    """
    Attach the status as seen at ``now``.

    The stored row is left untouched; an image whose reveal window has lapsed
    is reported as expired without any write.
    """
    message.effective_status = message.status_at(now)
    message.expired = message.effective_status == MessageStatus.EXPIRED.value
    return message


def observe_all(messages: Iterable[Message], now: datetime) -> List[Message]:
    return [observe(message, now) for message in messages]


class MessagesCRUD:
    """
    Message lifecycle engine.

    Owns sending, participant-scoped retrieval, sender edits and deletes,
    recipient read receipts and the view-once reveal of image messages:

        unrevealed --reveal_image--> revealed (counting down) --time--> expired

    The reveal timestamp is written once with a conditional UPDATE, so
    concurrent first reveals cannot produce two different deadlines.
    """

    def __init__(
        self,
        db: Session,
        images: ImagesCRUD,
        clock: Clock = utcnow,
        reveal_window_seconds: Optional[int] = None,
    ):
        self.db = db
        self.images = images
        self.clock = clock
        if reveal_window_seconds is None:
            reveal_window_seconds = settings.REVEAL_WINDOW_SECONDS
        self.reveal_window = timedelta(seconds=reveal_window_seconds)

    def _live(self):
        return live(self.db.query(Message), Message)

    def _find_for_sender(self, user_id: str, message_id: int) -> Message:
        message = self._live().filter(
            Message.id == message_id,
            Message.sender_id == user_id
        ).first()
        if not message:
            raise NotFoundOrUnauthorized()
        return message

    def _find_for_recipient(self, user_id: str, message_id: int) -> Message:
        message = self._live().filter(
            Message.id == message_id,
            Message.recipient_id == user_id
        ).first()
        if not message:
            raise NotFoundOrUnauthorized()
        return message

    def _commit(self, action: str, message: Message) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error during {action} for message {message.id}: {e}")
            self.db.rollback()
            raise

    def send(
        self,
        sender_id: str,
        recipient_id: str,
        content: str,
        kind: MessageKind | str = MessageKind.TEXT,
        image_id: Optional[str] = None,
    ) -> Message:
        """Create a message from sender to recipient. Friendship is not required here."""
        kind = MessageKind(kind)

        if sender_id == recipient_id or self.db.query(User.id).filter(User.id == recipient_id).first() is None:
            logger.warning(f"Rejected message from {sender_id}: invalid recipient {recipient_id}")
            raise InvalidRecipient()

        if kind is MessageKind.IMAGE:
            image = self.images.get_image(image_id) if image_id else None
            if image is None or image.owner_id != sender_id:
                logger.warning(f"Rejected image message from {sender_id}: image {image_id} not owned")
                raise ImageNotOwned()
        else:
            image_id = None

        now = self.clock()
        message = Message(
            sender_id=sender_id,
            recipient_id=recipient_id,
            content=content,
            kind=kind.value,
            image_id=image_id,
            is_read=False,
            status=MessageStatus.SENT.value,
            image_revealed=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(message)
        self._commit("send", message)
        self.db.refresh(message)
        logger.info(f"Message {message.id} ({kind.value}) sent {sender_id} -> {recipient_id}")
        return observe(message, now)

    def get(self, user_id: str, message_id: int) -> Optional[Message]:
        """Get a message the user sent or received. Anything else looks like it does not exist."""
        message = self._live().filter(
            Message.id == message_id,
            or_(Message.sender_id == user_id, Message.recipient_id == user_id)
        ).first()
        if message is None:
            return None
        return observe(message, self.clock())

    def update_content(
        self,
        user_id: str,
        message_id: int,
        content: Optional[str] = None,
        status: Optional[MessageStatus | str] = None,
    ) -> Message:
        """
        Sender-only edit. Only supplied fields change; expired messages are frozen.

        Text messages never carry the expired status and keep non-blank content.
        """
        message = self._find_for_sender(user_id, message_id)
        now = self.clock()
        if message.is_expired_at(now):
            raise MessageExpired()

        if content is None and status is None:
            return observe(message, now)

        if status is not None and MessageStatus(status) is MessageStatus.EXPIRED and not message.is_image:
            raise NotAnImageMessage("Only image messages can expire")
        if content is not None and not message.is_image and not content.strip():
            raise InvalidContent()

        if content is not None:
            message.content = content
        if status is not None:
            message.status = MessageStatus(status).value
        message.updated_at = now
        self._commit("update", message)
        logger.info(f"Message {message_id} updated by sender {user_id}")
        return observe(message, now)

    def mark_read(self, user_id: str, message_id: int) -> Message:
        """Recipient-only read receipt. Idempotent; never overwrites an expired status."""
        message = self._find_for_recipient(user_id, message_id)
        now = self.clock()

        changed = False
        if not message.is_read:
            message.is_read = True
            changed = True
        if message.status not in (MessageStatus.READ.value, MessageStatus.EXPIRED.value):
            message.status = MessageStatus.READ.value
            changed = True

        if changed:
            message.updated_at = now
            self._commit("mark_read", message)
            logger.info(f"Message {message_id} marked read by {user_id}")
        return observe(message, now)

    def reveal_image(self, user_id: str, message_id: int) -> Message:
        """
        Recipient reveals a view-once image.

        The first call starts the countdown. Later calls return the current
        state with the original deadline, so clients can retry safely.
        """
        message = self._find_for_recipient(user_id, message_id)
        if not message.is_image:
            raise NotAnImageMessage()

        if message.reveal_expires_at is not None:
            return observe(message, self.clock())

        if message.status == MessageStatus.EXPIRED.value:
            raise MessageExpired()

        now = self.clock()
        expires_at = now + self.reveal_window
        try:
            won = self.db.query(Message).filter(
                Message.id == message.id,
                Message.reveal_expires_at.is_(None),
                Message.status != MessageStatus.EXPIRED.value,
                Message.deleted_at.is_(None),
            ).update({
                Message.image_revealed: True,
                Message.is_read: True,
                Message.reveal_expires_at: expires_at,
                Message.updated_at: now,
            }, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error revealing message {message_id}: {e}")
            self.db.rollback()
            raise

        self.db.refresh(message)
        if message.deleted_at is not None:
            raise NotFoundOrUnauthorized()
        if not won and message.reveal_expires_at is None:
            # Expired by the sender after this request loaded the row
            raise MessageExpired()
        if won:
            logger.info(f"Message {message_id} revealed by {user_id}, expires at {expires_at.isoformat()}")
        else:
            logger.info(f"Message {message_id} was already revealed by a concurrent request")
        return observe(message, now)

    def delete(self, user_id: str, message_id: int) -> None:
        """Sender-only soft delete."""
        message = self._find_for_sender(user_id, message_id)
        now = self.clock()
        tombstone(message, now)
        message.updated_at = now
        self._commit("delete", message)
        logger.info(f"Message {message_id} deleted by sender {user_id}")
