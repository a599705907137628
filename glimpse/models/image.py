from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from glimpse.database import Base
from glimpse.utils.clock import utcnow
import uuid

class Image(Base):
    """Metadata for an uploaded image blob. The blob itself lives in the blob store."""
    __tablename__ = "images"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    storage_locator = Column(String(500), nullable=False)
    url = Column(String(500), nullable=False)
    filename = Column(String(100), nullable=True)
    mime_type = Column(String(50), nullable=False)
    size_bytes = Column(Integer, nullable=False, default=0)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    owner = relationship("User", back_populates="images")

    def __repr__(self):
        return f"<Image id={self.id} owner={self.owner_id} locator={self.storage_locator}>"
