from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from glimpse.database import Base
from glimpse.utils.clock import utcnow
import uuid

class Friendship(Base):
    """Directed friendship: the owner considers friend_user a friend."""
    __tablename__ = "friendships"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    friend_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    owner = relationship("User", foreign_keys=[owner_id], back_populates="friendships")
    friend_user = relationship("User", foreign_keys=[friend_user_id])

    # No unique constraint: tombstoned rows may share the pair with a live one
    __table_args__ = (
        Index("ix_friendships_owner_friend", "owner_id", "friend_user_id"),
    )

    def __repr__(self):
        return f"<Friendship id={self.id} owner={self.owner_id} friend={self.friend_user_id}>"
