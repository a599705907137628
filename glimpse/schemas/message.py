from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime

from glimpse.models.message import Message, MessageKind, MessageStatus
from glimpse.schemas.user import PublicUser

class MessageCreate(BaseModel):
    recipient_id: str = Field(..., min_length=1)
    content: str = Field("", max_length=5000, description="Text body, or caption for image messages")
    kind: MessageKind = MessageKind.TEXT
    image_id: Optional[str] = None

    @model_validator(mode="after")
    def check_image_reference(self):
        if self.kind is MessageKind.IMAGE and not self.image_id:
            raise ValueError("image_id is required for image messages")
        if self.kind is MessageKind.TEXT:
            if self.image_id:
                raise ValueError("image_id is only allowed on image messages")
            if not self.content.strip():
                raise ValueError("content is required for text messages")
        return self

class MessageUpdate(BaseModel):
    """Sender edit; only supplied fields are changed"""
    content: Optional[str] = Field(None, max_length=5000)
    status: Optional[MessageStatus] = None

class MessageResponse(BaseModel):
    id: int
    sender_id: str
    recipient_id: str
    content: str
    kind: MessageKind
    image_id: Optional[str] = None
    image_url: Optional[str] = None
    is_read: bool
    status: MessageStatus
    image_revealed: bool
    reveal_expires_at: Optional[datetime] = None
    expired: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_message(cls, message: Message, viewer_id: str) -> "MessageResponse":
        """
        Build the API view of an observed message.

        The image URL is shown to the sender until expiry and to the
        recipient only between reveal and expiry.
        """
        expired = getattr(message, "expired", False)
        status = getattr(message, "effective_status", message.status)

        image_url = None
        if message.image is not None and message.image.deleted_at is None and not expired:
            if viewer_id == message.sender_id or message.image_revealed:
                image_url = message.image.url

        return cls(
            id=message.id,
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            kind=message.kind,
            image_id=message.image_id,
            image_url=image_url,
            is_read=message.is_read,
            status=status,
            image_revealed=message.image_revealed,
            reveal_expires_at=message.reveal_expires_at,
            expired=expired,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )

class MessagesListResponse(BaseModel):
    messages: List[MessageResponse]
    total_count: int
    page: int
    page_size: Optional[int] = None

class MessageStatusResponse(BaseModel):
    message: str
    status: str

class ChatPreviewResponse(BaseModel):
    friend_id: str
    friend: Optional[PublicUser] = None
    last_message: MessageResponse
    unread_count: int

class ChatPreviewListResponse(BaseModel):
    chats: List[ChatPreviewResponse]
