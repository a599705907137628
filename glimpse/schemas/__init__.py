from glimpse.schemas.user import PublicUser, UserUpdate, UserResponse, CurrentUser
from glimpse.schemas.friends import (
    FriendAddRequest, FriendshipResponse, FriendsListResponse, FriendStatusResponse
)
from glimpse.schemas.image import ImageResponse, ImagesListResponse, ImageDeleteResponse
from glimpse.schemas.message import (
    MessageCreate, MessageUpdate, MessageResponse, MessagesListResponse, MessageStatusResponse,
    ChatPreviewResponse, ChatPreviewListResponse
)

__all__ = [
    "PublicUser", "UserUpdate", "UserResponse", "CurrentUser",
    "FriendAddRequest", "FriendshipResponse", "FriendsListResponse", "FriendStatusResponse",
    "ImageResponse", "ImagesListResponse", "ImageDeleteResponse",
    "MessageCreate", "MessageUpdate", "MessageResponse", "MessagesListResponse", "MessageStatusResponse",
    "ChatPreviewResponse", "ChatPreviewListResponse",
]
