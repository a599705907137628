from glimpse.database import Base
from glimpse.models.user import User
from glimpse.models.friendship import Friendship
from glimpse.models.image import Image
from glimpse.models.message import Message, MessageKind, MessageStatus

__all__ = [
    "Base", "User", "Friendship", "Image", "Message", "MessageKind", "MessageStatus"
]
