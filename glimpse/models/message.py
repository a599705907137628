from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Integer, Index
from sqlalchemy.orm import relationship
from glimpse.database import Base
from glimpse.utils.clock import utcnow
import enum

class MessageKind(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"

class MessageStatus(str, enum.Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    EXPIRED = "expired"

class Message(Base):
    """Direct message between two users; image messages are view-once."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    recipient_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False, default="")
    kind = Column(String(10), nullable=False, default=MessageKind.TEXT.value)
    image_id = Column(String, ForeignKey("images.id", ondelete="SET NULL"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    status = Column(String(10), nullable=False, default=MessageStatus.SENT.value)

    # Reveal sub-state, only meaningful for image messages
    image_revealed = Column(Boolean, nullable=False, default=False)
    reveal_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    sender = relationship("User", foreign_keys=[sender_id], back_populates="sent_messages")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="received_messages")
    image = relationship("Image")

    __table_args__ = (
        Index("ix_messages_sender_recipient", "sender_id", "recipient_id"),
    )

    @property
    def is_image(self) -> bool:
        return self.kind == MessageKind.IMAGE.value

    def is_expired_at(self, now: datetime) -> bool:
        """Expiry is derived, never scheduled: stored terminal status or a lapsed reveal window."""
        if self.status == MessageStatus.EXPIRED.value:
            return True
        return bool(
            self.image_revealed
            and self.reveal_expires_at is not None
            and self.reveal_expires_at <= now
        )

    def status_at(self, now: datetime) -> str:
        if self.is_expired_at(now):
            return MessageStatus.EXPIRED.value
        return self.status

    def counterpart_of(self, user_id: str) -> str:
        return self.recipient_id if self.sender_id == user_id else self.sender_id

    def __repr__(self):
        return f"<Message id={self.id} sender={self.sender_id} recipient={self.recipient_id} kind={self.kind}>"
