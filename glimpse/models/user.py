from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from glimpse.database import Base
from glimpse.utils.clock import utcnow

class User(Base):
    """User model for storing identity information mirrored from the auth provider."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Firebase UID
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=True)

    # Public profile fields shown in friend lists and chat previews
    initials = Column(String(3), nullable=True)
    color = Column(String(20), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships - one to many
    friendships = relationship("Friendship", foreign_keys="Friendship.owner_id", back_populates="owner", cascade="all, delete-orphan")
    images = relationship("Image", back_populates="owner", cascade="all, delete-orphan")
    sent_messages = relationship("Message", foreign_keys="Message.sender_id", back_populates="sender", cascade="all, delete-orphan")
    received_messages = relationship("Message", foreign_keys="Message.recipient_id", back_populates="recipient", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
